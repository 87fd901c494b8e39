# audit/domain/repository_interface.py

from abc import ABC, abstractmethod

from audit.domain.entities import AuditEntry, IntegrationLog


class AuditRepositoryInterface(ABC):
    @abstractmethod
    def registrar_auditoria(self, entry: AuditEntry) -> None:
        pass

    @abstractmethod
    def registrar_integracao(self, log: IntegrationLog) -> None:
        pass
