# proposals/domain/simulacao.py

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


def calcular_parcela(valor, taxa_mensal, prazo_meses) -> Optional[Decimal]:
    """
    Parcela pela tabela Price: PV * i / (1 - (1 + i) ** -n), com `taxa_mensal`
    em percentual (1.85 = 1,85% a.m.). Sem valor, taxa ou prazo não há simulação.
    """
    if not valor or not prazo_meses or taxa_mensal is None:
        return None
    valor = Decimal(str(valor))
    prazo = int(prazo_meses)
    taxa = Decimal(str(taxa_mensal)) / Decimal("100")
    if taxa == 0:
        parcela = valor / prazo
    else:
        parcela = valor * taxa / (1 - (1 + taxa) ** -prazo)
    return parcela.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
