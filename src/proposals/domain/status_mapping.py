# proposals/domain/status_mapping.py

from typing import Optional

from proposals.domain.entities import BankStatus

STATUS_FACTA = {
    "ANALISE": BankStatus.EM_ANALISE,
    "APROVADO": BankStatus.APROVADO,
    "REPROVADO": BankStatus.REPROVADO,
    "PENDENTE_DOCUMENTOS": BankStatus.PENDENTE_DOCUMENTOS,
    "PENDENTE_ASSINATURA": BankStatus.PENDENTE_ASSINATURA,
    "PAGO": BankStatus.PAGO,
}


def mapear_status_facta(status_externo: Optional[str], atual: BankStatus) -> BankStatus:
    """Correspondência exata com o código da Facta; desconhecido (ou ausente) mantém o atual."""
    if not status_externo:
        return atual
    return STATUS_FACTA.get(status_externo, atual)
