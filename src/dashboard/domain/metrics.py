# dashboard/domain/metrics.py

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Tuple

import pandas as pd

from dashboard.domain.entities import COLUNAS_VENDAS, META_MENSAL_PADRAO, TOP_RANKING, SaleStatus


def calcular_comissao(valor_liberado, percentual) -> Tuple[Decimal, Decimal]:
    """
    Converte o percentual digitado (0 a 100) na fração armazenada (4 casas)
    e calcula o valor da comissão (2 casas).
    """
    fracao = (Decimal(str(percentual)) / Decimal("100")).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
    valor = (Decimal(str(valor_liberado)) * fracao).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return fracao, valor


def _normalizar(df: pd.DataFrame) -> pd.DataFrame:
    if df is None or df.empty:
        return pd.DataFrame(columns=COLUNAS_VENDAS)
    df = df.copy()
    df["released_value"] = df["released_value"].astype(float).fillna(0.0)
    df["commission_value"] = df["commission_value"].astype(float).fillna(0.0)
    df["sale_date"] = pd.to_datetime(df["sale_date"])
    return df


def vendas_do_mes(df: pd.DataFrame, ano: int, mes: int) -> pd.DataFrame:
    df = _normalizar(df)
    if df.empty:
        return df
    filtro = (df["sale_date"].dt.year == ano) & (df["sale_date"].dt.month == mes)
    return df[filtro]


def _pagas(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return df
    return df[df["status"] == SaleStatus.PAGO.value]


def resumo_mensal(df: pd.DataFrame, ano: int, mes: int, meta: float = META_MENSAL_PADRAO) -> dict:
    mensal = vendas_do_mes(df, ano, mes)
    pagas = _pagas(mensal)

    qtd_pagas = len(pagas)
    receita = float(pagas["released_value"].sum()) if qtd_pagas else 0.0
    comissoes = float(pagas["commission_value"].sum()) if qtd_pagas else 0.0

    return {
        "ano": ano,
        "mes": mes,
        "total_vendas": len(mensal),
        "vendas_pagas": qtd_pagas,
        "valor_liberado": round(receita, 2),
        "comissoes": round(comissoes, 2),
        "comissao_media": round(comissoes / qtd_pagas, 2) if qtd_pagas else 0.0,
        "ticket_medio": round(receita / qtd_pagas, 2) if qtd_pagas else 0.0,
        "meta": meta,
        "progresso_meta": round(receita / meta * 100, 1) if meta else 0.0,
    }


def projecao_mensal(df: pd.DataFrame, hoje: date, meta: float = META_MENSAL_PADRAO) -> dict:
    """Projeção até o fim do mês pelo ritmo diário das vendas pagas."""
    dias_no_mes = calendar.monthrange(hoje.year, hoje.month)[1]
    dias_restantes = dias_no_mes - hoje.day
    dias_decorridos = max(hoje.day, 1)

    pagas = _pagas(vendas_do_mes(df, hoje.year, hoje.month))
    total_vendas = len(pagas)
    receita = float(pagas["released_value"].sum()) if total_vendas else 0.0
    comissao = float(pagas["commission_value"].sum()) if total_vendas else 0.0

    media_diaria_receita = receita / dias_decorridos
    media_diaria_vendas = total_vendas / dias_decorridos

    receita_projetada = receita + media_diaria_receita * dias_restantes
    vendas_projetadas = round(total_vendas + media_diaria_vendas * dias_restantes)
    comissao_projetada = comissao
    if total_vendas > 0:
        comissao_projetada += (comissao / total_vendas) * (media_diaria_vendas * dias_restantes)

    return {
        "dia_atual": hoje.day,
        "dias_no_mes": dias_no_mes,
        "dias_restantes": dias_restantes,
        "receita_atual": round(receita, 2),
        "vendas_atuais": total_vendas,
        "media_diaria_receita": round(media_diaria_receita, 2),
        "receita_projetada": round(receita_projetada, 2),
        "vendas_projetadas": vendas_projetadas,
        "comissao_projetada": round(comissao_projetada, 2),
        "meta": meta,
        "diferenca_meta": round(meta - receita_projetada, 2),
        "vai_bater_meta": receita_projetada >= meta,
    }


def ranking_vendedores(df: pd.DataFrame, ano: int, mes: int, limite: int = TOP_RANKING) -> List[dict]:
    pagas = _pagas(vendas_do_mes(df, ano, mes))
    if pagas.empty:
        return []

    pagas = pagas.assign(seller_name=pagas["seller_name"].fillna("Vendedor"))
    ranking = (
        pagas.groupby(["seller_id", "seller_name"])
        .agg(
            receita=("released_value", "sum"),
            vendas=("released_value", "size"),
            comissao=("commission_value", "sum"),
        )
        .reset_index()
        .sort_values("receita", ascending=False, kind="stable")
        .head(limite)
    )

    return [
        {
            "posicao": posicao,
            "seller_id": str(row.seller_id),
            "nome": row.seller_name,
            "receita": round(float(row.receita), 2),
            "vendas": int(row.vendas),
            "comissao": round(float(row.comissao), 2),
        }
        for posicao, row in enumerate(ranking.itertuples(index=False), start=1)
    ]
