#authentication/domain/repository_interface.py

from abc import ABC, abstractmethod
from typing import Optional

from authentication.domain.entities import Identidade


class IdentityRepositoryInterface(ABC):
    """Provedor de identidade: contas que podem se autenticar."""

    @abstractmethod
    def criar_identidade(self, email: str, senha_hash: str, full_name: Optional[str],
                         email_confirmado: bool = True) -> Identidade:
        """Levanta IdentidadeJaExisteError se o email já estiver cadastrado."""

    @abstractmethod
    def buscar_por_id(self, user_id: str) -> Optional[Identidade]:
        pass

    @abstractmethod
    def buscar_por_email(self, email: str) -> Optional[Identidade]:
        pass

    @abstractmethod
    def atualizar_senha(self, user_id: str, senha_hash: str) -> None:
        pass

    @abstractmethod
    def remover_identidade(self, user_id: str) -> None:
        pass
