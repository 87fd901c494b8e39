# proposals/infrastructure/proposal_repository.py

import uuid
from datetime import datetime
from typing import List, Optional

import psycopg2
from psycopg2.extras import Json

from proposals.domain.entities import Bank, BankStatus, Client, InternalStatus, Proposal
from proposals.domain.repository_interface import ProposalRepositoryInterface
from registry.infrastructure.registry_repository import RegistryRepository
from utils.json_sanitize import clean_for_json

_COLUNAS_PROPOSTA = (
    "id, company_id, client_id, seller_id, bank_id, modality, "
    "requested_value, term_months, interest_rate, covenant, "
    "bank_agency, bank_account, bank_account_type, pix_key, "
    "internal_status, bank_status, protocolo_banco, "
    "payload_enviado, resposta_banco, erro_banco, observations, created_at, updated_at"
)


def _json(valor):
    return Json(clean_for_json(valor)) if valor is not None else None


def _proposta(row) -> Proposal:
    return Proposal(
        id=str(row[0]),
        company_id=str(row[1]),
        client_id=str(row[2]),
        seller_id=str(row[3]) if row[3] else None,
        bank_id=str(row[4]) if row[4] else None,
        modality=row[5],
        requested_value=row[6],
        term_months=row[7],
        interest_rate=row[8],
        covenant=row[9],
        bank_agency=row[10],
        bank_account=row[11],
        bank_account_type=row[12],
        pix_key=row[13],
        internal_status=InternalStatus(row[14]),
        bank_status=BankStatus(row[15]),
        protocolo_banco=row[16],
        payload_enviado=row[17],
        resposta_banco=row[18],
        erro_banco=row[19],
        observations=row[20],
        created_at=row[21],
        updated_at=row[22],
    )


class ProposalRepository(ProposalRepositoryInterface):
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ Conexão com o banco de dados falhou e é None.")
        self.conn = conn
        # Clientes e bancos vêm das mesmas tabelas do cadastro
        self.cadastros = RegistryRepository(conn)

    def buscar_proposta(self, proposal_id: str) -> Optional[Proposal]:
        with self.conn.cursor() as cur:
            cur.execute(f"SELECT {_COLUNAS_PROPOSTA} FROM proposals WHERE id = %s", (proposal_id,))
            row = cur.fetchone()
        return _proposta(row) if row else None

    def buscar_cliente(self, client_id: str) -> Optional[Client]:
        return self.cadastros.buscar_cliente(client_id)

    def buscar_banco(self, bank_id: str) -> Optional[Bank]:
        return self.cadastros.buscar_banco(bank_id)

    def criar_proposta(self, proposal: Proposal) -> Proposal:
        proposal.id = proposal.id or str(uuid.uuid4())
        proposal.created_at = proposal.updated_at = datetime.utcnow()
        try:
            with self.conn.cursor() as cur:
                cur.execute(f"""
                    INSERT INTO proposals ({_COLUNAS_PROPOSTA})
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                            %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """, (
                    proposal.id,
                    proposal.company_id,
                    proposal.client_id,
                    proposal.seller_id,
                    proposal.bank_id,
                    proposal.modality,
                    proposal.requested_value,
                    proposal.term_months,
                    proposal.interest_rate,
                    proposal.covenant,
                    proposal.bank_agency,
                    proposal.bank_account,
                    proposal.bank_account_type,
                    proposal.pix_key,
                    proposal.internal_status.value,
                    proposal.bank_status.value,
                    proposal.protocolo_banco,
                    _json(proposal.payload_enviado),
                    _json(proposal.resposta_banco),
                    proposal.erro_banco,
                    proposal.observations,
                    proposal.created_at,
                    proposal.updated_at,
                ))
            self.conn.commit()
        except psycopg2.Error:
            self.conn.rollback()
            raise
        return proposal

    def listar_propostas(
        self,
        company_id: str,
        seller_id: Optional[str] = None,
        internal_status: Optional[InternalStatus] = None,
        bank_status: Optional[BankStatus] = None,
    ) -> List[Proposal]:
        query = f"SELECT {_COLUNAS_PROPOSTA} FROM proposals WHERE company_id = %s"
        params = [company_id]
        if seller_id:
            query += " AND seller_id = %s"
            params.append(seller_id)
        if internal_status:
            query += " AND internal_status = %s"
            params.append(InternalStatus(internal_status).value)
        if bank_status:
            query += " AND bank_status = %s"
            params.append(BankStatus(bank_status).value)
        query += " ORDER BY created_at DESC"

        with self.conn.cursor() as cur:
            cur.execute(query, tuple(params))
            rows = cur.fetchall()
        return [_proposta(r) for r in rows]

    def salvar_resultado_envio(self, proposal: Proposal) -> None:
        proposal.updated_at = datetime.utcnow()
        with self.conn.cursor() as cur:
            cur.execute("""
                UPDATE proposals
                SET bank_status = %s,
                    protocolo_banco = %s,
                    payload_enviado = %s,
                    resposta_banco = %s,
                    erro_banco = %s,
                    updated_at = %s
                WHERE id = %s
            """, (
                proposal.bank_status.value,
                proposal.protocolo_banco,
                _json(proposal.payload_enviado),
                _json(proposal.resposta_banco),
                proposal.erro_banco,
                proposal.updated_at,
                proposal.id,
            ))
        self.conn.commit()

    def atualizar_status_banco(self, proposal_id: str, bank_status, resposta_banco) -> None:
        with self.conn.cursor() as cur:
            cur.execute("""
                UPDATE proposals
                SET bank_status = %s, resposta_banco = %s, updated_at = %s
                WHERE id = %s
            """, (
                BankStatus(bank_status).value,
                _json(resposta_banco),
                datetime.utcnow(),
                proposal_id,
            ))
        self.conn.commit()
