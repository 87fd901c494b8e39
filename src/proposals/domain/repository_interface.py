# proposals/domain/repository_interface.py

from abc import ABC, abstractmethod
from typing import List, Optional

from proposals.domain.entities import Bank, BankStatus, Client, InternalStatus, Proposal


class ProposalRepositoryInterface(ABC):
    @abstractmethod
    def buscar_proposta(self, proposal_id: str) -> Optional[Proposal]:
        pass

    @abstractmethod
    def buscar_cliente(self, client_id: str) -> Optional[Client]:
        pass

    @abstractmethod
    def buscar_banco(self, bank_id: str) -> Optional[Bank]:
        pass

    @abstractmethod
    def salvar_resultado_envio(self, proposal: Proposal) -> None:
        """Persiste status, protocolo, payload, resposta e erro do banco."""
        pass

    @abstractmethod
    def atualizar_status_banco(self, proposal_id: str, bank_status, resposta_banco) -> None:
        pass

    @abstractmethod
    def criar_proposta(self, proposal: Proposal) -> Proposal:
        pass

    @abstractmethod
    def listar_propostas(
        self,
        company_id: str,
        seller_id: Optional[str] = None,
        internal_status: Optional[InternalStatus] = None,
        bank_status: Optional[BankStatus] = None,
    ) -> List[Proposal]:
        """Mais recentes primeiro."""
        pass
