# dashboard/api/schemas.py

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from dashboard.domain.entities import CovenantType, SaleStatus


class NovaVendaRequest(BaseModel):
    client_name: str = Field(..., min_length=1, max_length=150)
    covenant_type: CovenantType
    released_value: Decimal = Field(..., gt=0, description="Valor liberado")
    commission_percentage: Decimal = Field(..., ge=0, le=100, description="Percentual de comissão (0 a 100)")
    sale_date: date
    status: SaleStatus = SaleStatus.EM_ANDAMENTO
    observations: Optional[str] = None


class AtualizarVendaRequest(BaseModel):
    """Atualização parcial; a comissão é recalculada quando valor ou percentual mudam."""
    client_name: Optional[str] = Field(None, min_length=1, max_length=150)
    covenant_type: Optional[CovenantType] = None
    released_value: Optional[Decimal] = Field(None, gt=0)
    commission_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    sale_date: Optional[date] = None
    status: Optional[SaleStatus] = None
    observations: Optional[str] = None


class MetaMensalRequest(BaseModel):
    ano: int = Field(..., ge=2000, le=2100)
    mes: int = Field(..., ge=1, le=12)
    target_value: Decimal = Field(..., gt=0, description="Meta mensal (R$)")
