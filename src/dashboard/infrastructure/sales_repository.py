# dashboard/infrastructure/sales_repository.py

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

import pandas as pd
import psycopg2

from dashboard.domain.entities import CovenantType, Sale, SaleStatus
from dashboard.domain.repository_interface import SalesRepositoryInterface
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("dashboard")

_COLUNAS_VENDA = (
    "id, company_id, seller_id, client_name, covenant_type, released_value, "
    "commission_percentage, commission_value, sale_date, status, observations, created_at"
)


def _intervalo_mes(ano: int, mes: int):
    inicio = date(ano, mes, 1)
    fim = date(ano + 1, 1, 1) if mes == 12 else date(ano, mes + 1, 1)
    return inicio, fim


def _venda(row) -> Sale:
    (id_, company_id, seller_id, client_name, covenant_type, released_value,
     commission_percentage, commission_value, sale_date, status, observations, created_at) = row
    return Sale(
        id=str(id_),
        company_id=str(company_id),
        seller_id=str(seller_id),
        client_name=client_name,
        covenant_type=CovenantType(covenant_type),
        released_value=released_value,
        commission_percentage=commission_percentage,
        commission_value=commission_value,
        sale_date=sale_date,
        status=SaleStatus(status),
        observations=observations,
        created_at=created_at,
    )


class SalesRepository(SalesRepositoryInterface):
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ Conexão com o banco de dados falhou e é None.")
        self.conn = conn

    def _executar(self, query: str, params: tuple) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, params)
            self.conn.commit()
        except psycopg2.Error:
            self.conn.rollback()
            raise

    def registrar_venda(self, sale: Sale) -> Sale:
        sale.id = sale.id or str(uuid.uuid4())
        with self.conn.cursor() as cur:
            cur.execute("""
                INSERT INTO sales
                    (id, company_id, seller_id, client_name, covenant_type, released_value,
                     commission_percentage, commission_value, sale_date, status, observations, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """, (
                sale.id,
                sale.company_id,
                sale.seller_id,
                sale.client_name,
                sale.covenant_type.value,
                sale.released_value,
                sale.commission_percentage,
                sale.commission_value,
                sale.sale_date,
                sale.status.value,
                sale.observations,
                sale.created_at,
            ))
        self.conn.commit()
        return sale

    def carregar_vendas_mes(
        self, company_id: str, ano: int, mes: int, seller_id: Optional[str] = None
    ) -> pd.DataFrame:
        inicio, fim = _intervalo_mes(ano, mes)

        query = """
            SELECT s.id, s.seller_id, p.full_name AS seller_name, s.released_value,
                   s.commission_value, s.sale_date, s.status
            FROM sales s
            LEFT JOIN profiles p ON p.user_id = s.seller_id
            WHERE s.company_id = %s AND s.sale_date >= %s AND s.sale_date < %s
        """
        params = [company_id, inicio, fim]
        if seller_id:
            query += " AND s.seller_id = %s"
            params.append(seller_id)

        df = pd.read_sql(query, self.conn, params=params)
        logger.info(f"📊 {len(df)} vendas carregadas ({mes:02d}/{ano}) para a empresa {company_id}")
        return df

    def listar_vendas(
        self,
        company_id: str,
        seller_id: Optional[str] = None,
        ano: Optional[int] = None,
        mes: Optional[int] = None,
    ) -> List[Sale]:
        query = f"SELECT {_COLUNAS_VENDA} FROM sales WHERE company_id = %s"
        params = [company_id]
        if seller_id:
            query += " AND seller_id = %s"
            params.append(seller_id)
        if ano and mes:
            inicio, fim = _intervalo_mes(ano, mes)
            query += " AND sale_date >= %s AND sale_date < %s"
            params.extend([inicio, fim])
        query += " ORDER BY sale_date DESC, created_at DESC"

        with self.conn.cursor() as cur:
            cur.execute(query, tuple(params))
            rows = cur.fetchall()
        return [_venda(r) for r in rows]

    def buscar_venda(self, sale_id: str) -> Optional[Sale]:
        with self.conn.cursor() as cur:
            cur.execute(f"SELECT {_COLUNAS_VENDA} FROM sales WHERE id = %s", (sale_id,))
            row = cur.fetchone()
        return _venda(row) if row else None

    def atualizar_venda(self, sale: Sale) -> None:
        self._executar("""
            UPDATE sales
            SET client_name = %s, covenant_type = %s, released_value = %s,
                commission_percentage = %s, commission_value = %s, sale_date = %s,
                status = %s, observations = %s
            WHERE id = %s
        """, (
            sale.client_name,
            sale.covenant_type.value,
            sale.released_value,
            sale.commission_percentage,
            sale.commission_value,
            sale.sale_date,
            sale.status.value,
            sale.observations,
            sale.id,
        ))

    def remover_venda(self, sale_id: str) -> None:
        self._executar("DELETE FROM sales WHERE id = %s", (sale_id,))

    # =====================================================
    # 🎯 Metas mensais
    # =====================================================
    def buscar_meta(self, company_id: str, ano: int, mes: int) -> Optional[Decimal]:
        with self.conn.cursor() as cur:
            cur.execute("""
                SELECT target_value FROM monthly_goals
                WHERE company_id = %s AND year = %s AND month = %s
            """, (company_id, ano, mes))
            row = cur.fetchone()
        return row[0] if row else None

    def salvar_meta(self, company_id: str, ano: int, mes: int, valor: Decimal) -> None:
        self._executar("""
            INSERT INTO monthly_goals (id, company_id, year, month, target_value, created_at, updated_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (company_id, year, month)
            DO UPDATE SET target_value = EXCLUDED.target_value, updated_at = EXCLUDED.updated_at
        """, (str(uuid.uuid4()), company_id, ano, mes, valor, datetime.utcnow(), datetime.utcnow()))
        logger.info(f"🎯 Meta {mes:02d}/{ano} da empresa {company_id} definida em {valor}")
