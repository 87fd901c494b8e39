# provisioning/domain/repository_interface.py

from abc import ABC, abstractmethod
from typing import List, Optional

from provisioning.domain.entities import Company, Profile, RoleAssignment


class TenantRepositoryInterface(ABC):
    # ---- Empresas
    @abstractmethod
    def buscar_empresa(self, company_id: str) -> Optional[Company]:
        pass

    @abstractmethod
    def buscar_empresa_por_cnpj(self, cnpj: str) -> Optional[Company]:
        pass

    @abstractmethod
    def criar_empresa(self, company: Company) -> Company:
        pass

    @abstractmethod
    def remover_empresa(self, company_id: str) -> None:
        pass

    # ---- Perfis
    @abstractmethod
    def buscar_perfil(self, user_id: str) -> Optional[Profile]:
        pass

    @abstractmethod
    def criar_perfil(self, profile: Profile) -> bool:
        """Retorna False quando já existe perfil para o user_id (nada é gravado)."""

    @abstractmethod
    def vincular_empresa_perfil(self, user_id: str, company_id: str) -> None:
        pass

    @abstractmethod
    def definir_perfil_ativo(self, user_id: str, ativo: bool) -> None:
        pass

    @abstractmethod
    def remover_perfil(self, user_id: str) -> None:
        pass

    @abstractmethod
    def contar_perfis_ativos(self, company_id: str) -> int:
        pass

    @abstractmethod
    def listar_perfis(self, company_id: str) -> List[Profile]:
        pass

    # ---- Roles
    @abstractmethod
    def buscar_role(self, user_id: str) -> Optional[RoleAssignment]:
        pass

    @abstractmethod
    def inserir_role(self, assignment: RoleAssignment) -> None:
        pass

    @abstractmethod
    def upsert_role(self, assignment: RoleAssignment) -> None:
        """Chave: user_id. Move o usuário para a role/empresa informadas."""

    @abstractmethod
    def remover_role(self, user_id: str) -> None:
        pass
