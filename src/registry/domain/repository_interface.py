# registry/domain/repository_interface.py

from abc import ABC, abstractmethod
from typing import List, Optional

from proposals.domain.entities import Bank, Client


class RegistryRepositoryInterface(ABC):
    """Cadastros da empresa usados pelas propostas: clientes e bancos."""

    # 👥 Clientes
    @abstractmethod
    def buscar_cliente(self, client_id: str) -> Optional[Client]:
        pass

    @abstractmethod
    def buscar_cliente_por_cpf(self, company_id: str, cpf: str) -> Optional[Client]:
        pass

    @abstractmethod
    def listar_clientes(self, company_id: str, busca: Optional[str] = None) -> List[Client]:
        """
        `busca` com algum dígito compara o CPF exato (só os dígitos); sem dígitos procura
        no nome (sem diferenciar maiúsculas).
        """
        pass

    @abstractmethod
    def criar_cliente(self, client: Client) -> Client:
        pass

    @abstractmethod
    def atualizar_cliente(self, client: Client) -> None:
        pass

    @abstractmethod
    def remover_cliente(self, client_id: str) -> None:
        pass

    @abstractmethod
    def cliente_possui_propostas(self, client_id: str) -> bool:
        pass

    # 🏦 Bancos
    @abstractmethod
    def buscar_banco(self, bank_id: str) -> Optional[Bank]:
        pass

    @abstractmethod
    def listar_bancos(self, company_id: str, somente_ativos: bool = False) -> List[Bank]:
        pass

    @abstractmethod
    def criar_banco(self, bank: Bank) -> Bank:
        pass

    @abstractmethod
    def atualizar_banco(self, bank: Bank) -> None:
        pass

    @abstractmethod
    def remover_banco(self, bank_id: str) -> None:
        pass

    @abstractmethod
    def banco_possui_propostas(self, bank_id: str) -> bool:
        pass
