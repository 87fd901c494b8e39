# proposals/api/schemas.py

from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from proposals.domain.entities import Covenant, Modality


class EnviarPropostaRequest(BaseModel):
    proposal_id: UUID
    forcar_reenvio: bool = Field(False, description="Reenvia mesmo se já houver protocolo do banco")


class SincronizarStatusRequest(BaseModel):
    proposal_id: UUID


class NovaPropostaRequest(BaseModel):
    client_id: UUID
    bank_id: Optional[UUID] = None
    modality: Modality
    covenant: Optional[Covenant] = None
    requested_value: Optional[Decimal] = Field(None, gt=0, description="Valor solicitado")
    term_months: Optional[int] = Field(None, ge=1, le=420, description="Prazo em meses")
    interest_rate: Optional[Decimal] = Field(None, ge=0, le=100, description="Taxa mensal (%)")
    bank_agency: Optional[str] = Field(None, max_length=10)
    bank_account: Optional[str] = Field(None, max_length=20)
    bank_account_type: Optional[Literal["corrente", "poupanca"]] = "corrente"
    pix_key: Optional[str] = Field(None, max_length=140)
    observations: Optional[str] = Field(None, max_length=1000)
    internal_status: Literal["rascunho", "pre_cadastrada"] = "rascunho"
