# provisioning/application/authorization.py

from dataclasses import dataclass
from typing import Iterable, Optional

from authentication.domain.entities import SUPER_ADMIN_ROLES, AppRole, Identidade
from provisioning.domain.entities import Profile
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.errors import AuthorizationError, BusinessRuleError


@dataclass
class ContextoChamador:
    identidade: Identidade
    role: Optional[AppRole]
    perfil: Optional[Profile]

    @property
    def user_id(self) -> str:
        return self.identidade.id

    @property
    def company_id(self) -> Optional[str]:
        return self.perfil.company_id if self.perfil else None

    @property
    def is_super_admin(self) -> bool:
        return self.role in SUPER_ADMIN_ROLES


def carregar_contexto(identidade: Identidade, repo: TenantRepositoryInterface) -> ContextoChamador:
    """Role e empresa do chamador, sempre lidos do banco a cada requisição."""
    role = repo.buscar_role(identidade.id)
    return ContextoChamador(
        identidade=identidade,
        role=role.role if role else None,
        perfil=repo.buscar_perfil(identidade.id),
    )


def exigir_role(contexto: ContextoChamador, permitidas: Iterable[AppRole], mensagem: str) -> None:
    if contexto.role is None or contexto.role not in set(permitidas):
        raise AuthorizationError(mensagem)


def exigir_empresa(contexto: ContextoChamador) -> str:
    if not contexto.company_id:
        raise BusinessRuleError("Usuário sem empresa vinculada")
    return contexto.company_id


def exigir_mesma_empresa(contexto: ContextoChamador, company_id: Optional[str], mensagem: str) -> None:
    if contexto.is_super_admin:
        return
    if not contexto.company_id or contexto.company_id != company_id:
        raise AuthorizationError(mensagem)
