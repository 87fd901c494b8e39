# proposals/domain/entities.py

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class Modality(str, Enum):
    MARGEM_LIVRE = "margem_livre"
    FGTS_ANTECIPACAO = "fgts_antecipacao"
    PORTABILIDADE = "portabilidade"
    PORT_REFINANCIAMENTO = "port_refinanciamento"
    CARTAO_CONSIGNADO = "cartao_consignado"
    CREDITO_TRABALHADOR = "credito_trabalhador"


class BankStatus(str, Enum):
    NAO_ENVIADO = "nao_enviado"
    RECEBIDO = "recebido"
    PENDENTE_DOCUMENTOS = "pendente_documentos"
    PENDENTE_ASSINATURA = "pendente_assinatura"
    EM_ANALISE = "em_analise"
    APROVADO = "aprovado"
    REPROVADO = "reprovado"
    PAGO = "pago"


class InternalStatus(str, Enum):
    RASCUNHO = "rascunho"
    PRE_CADASTRADA = "pre_cadastrada"
    CADASTRADA = "cadastrada"
    ENVIADA_ANALISE = "enviada_analise"
    EM_ANALISE = "em_analise"
    PENDENTE_FORMALIZACAO = "pendente_formalizacao"
    PENDENTE_ASSINATURA = "pendente_assinatura"
    APROVADA = "aprovada"
    REPROVADA = "reprovada"
    CANCELADA = "cancelada"
    PAGA_LIBERADA = "paga_liberada"


class Covenant(str, Enum):
    INSS = "INSS"
    SIAPE = "SIAPE"
    CLT = "CLT"
    OUTROS = "OUTROS"


@dataclass
class Client:
    id: Optional[str]
    company_id: str
    cpf: str
    full_name: str
    birth_date: Optional[date] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None
    address_city: Optional[str] = None
    address_state: Optional[str] = None
    internal_notes: Optional[str] = None
    created_by: Optional[str] = None
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Bank:
    id: Optional[str]
    name: str
    code: Optional[str] = None
    possui_api: bool = False
    base_url: Optional[str] = None
    company_id: Optional[str] = None
    is_active: bool = True
    priority: int = 0

    @property
    def is_facta(self) -> bool:
        return (self.code or "").upper() == "FACTA" and self.possui_api


@dataclass
class Proposal:
    """
    Proposta de crédito. `modality` e `covenant` ficam como texto livre:
    valores fora dos enums ainda precisam ser enviados ao banco.
    """
    id: Optional[str]
    company_id: str
    client_id: str
    seller_id: Optional[str]
    bank_id: Optional[str]
    modality: str
    requested_value: Optional[Decimal] = None
    term_months: Optional[int] = None
    interest_rate: Optional[Decimal] = None
    covenant: Optional[str] = None
    bank_agency: Optional[str] = None
    bank_account: Optional[str] = None
    bank_account_type: Optional[str] = None
    pix_key: Optional[str] = None
    internal_status: InternalStatus = InternalStatus.RASCUNHO
    bank_status: BankStatus = BankStatus.NAO_ENVIADO
    protocolo_banco: Optional[str] = None
    payload_enviado: Optional[dict] = None
    resposta_banco: Any = None
    erro_banco: Optional[str] = None
    observations: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def ja_enviada(self) -> bool:
        return bool(self.protocolo_banco) and self.bank_status != BankStatus.NAO_ENVIADO
