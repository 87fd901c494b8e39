# dashboard/domain/entities.py

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class SaleStatus(str, Enum):
    EM_ANDAMENTO = "em_andamento"
    PAGO = "pago"
    CANCELADO = "cancelado"


class CovenantType(str, Enum):
    INSS = "INSS"
    SIAPE = "SIAPE"
    CLT = "CLT"
    OUTROS = "OUTROS"


# Colunas esperadas nos DataFrames de vendas
COLUNAS_VENDAS = [
    "id",
    "seller_id",
    "seller_name",
    "released_value",
    "commission_value",
    "sale_date",
    "status",
]

META_MENSAL_PADRAO = 20000.0
TOP_RANKING = 10


@dataclass
class Sale:
    company_id: str
    seller_id: str
    client_name: str
    covenant_type: CovenantType
    released_value: Decimal
    commission_percentage: Decimal
    commission_value: Decimal
    sale_date: date
    status: SaleStatus = SaleStatus.EM_ANDAMENTO
    observations: Optional[str] = None
    id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
