# registry/infrastructure/registry_repository.py

import uuid
from datetime import datetime
from typing import List, Optional

import psycopg2
from psycopg2 import errors as pg_errors

from proposals.domain.entities import Bank, Client
from registry.domain.cpf import somente_digitos
from registry.domain.repository_interface import RegistryRepositoryInterface
from utils.errors import CpfJaCadastradoError

_COLUNAS_CLIENTE = (
    "id, company_id, cpf, full_name, birth_date, phone, email, gender, "
    "address_city, address_state, internal_notes, created_by, is_active, created_at"
)
_COLUNAS_BANCO = "id, name, code, possui_api, base_url, company_id, is_active, priority"


def _cliente(row) -> Client:
    (id_, company_id, cpf, full_name, birth_date, phone, email, gender,
     address_city, address_state, internal_notes, created_by, is_active, created_at) = row
    return Client(
        id=str(id_),
        company_id=str(company_id),
        cpf=cpf,
        full_name=full_name,
        birth_date=birth_date,
        phone=phone,
        email=email,
        gender=gender,
        address_city=address_city,
        address_state=address_state,
        internal_notes=internal_notes,
        created_by=str(created_by) if created_by else None,
        is_active=is_active,
        created_at=created_at,
    )


def _banco(row) -> Bank:
    id_, name, code, possui_api, base_url, company_id, is_active, priority = row
    return Bank(
        id=str(id_),
        name=name,
        code=code,
        possui_api=bool(possui_api),
        base_url=base_url,
        company_id=str(company_id) if company_id else None,
        is_active=is_active,
        priority=priority or 0,
    )


class RegistryRepository(RegistryRepositoryInterface):
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

    def _existe(self, query: str, params: tuple) -> bool:
        with self.conn.cursor() as cur:
            cur.execute(query, params)
            return cur.fetchone() is not None

    # =====================================================
    # 👥 Clientes
    # =====================================================
    def buscar_cliente(self, client_id: str) -> Optional[Client]:
        with self.conn.cursor() as cur:
            cur.execute(f"SELECT {_COLUNAS_CLIENTE} FROM clients WHERE id = %s", (client_id,))
            row = cur.fetchone()
        return _cliente(row) if row else None

    def buscar_cliente_por_cpf(self, company_id: str, cpf: str) -> Optional[Client]:
        with self.conn.cursor() as cur:
            cur.execute(
                f"SELECT {_COLUNAS_CLIENTE} FROM clients WHERE company_id = %s AND cpf = %s",
                (company_id, cpf),
            )
            row = cur.fetchone()
        return _cliente(row) if row else None

    def listar_clientes(self, company_id: str, busca: Optional[str] = None) -> List[Client]:
        query = f"SELECT {_COLUNAS_CLIENTE} FROM clients WHERE company_id = %s"
        params = [company_id]
        if busca:
            digitos = somente_digitos(busca)
            if digitos:
                query += " AND cpf = %s"
                params.append(digitos)
            else:
                query += " AND full_name ILIKE %s"
                params.append(f"%{busca.strip()}%")
        query += " ORDER BY full_name"

        with self.conn.cursor() as cur:
            cur.execute(query, tuple(params))
            rows = cur.fetchall()
        return [_cliente(r) for r in rows]

    def criar_cliente(self, client: Client) -> Client:
        client.id = client.id or str(uuid.uuid4())
        client.created_at = datetime.utcnow()
        try:
            with self.conn.cursor() as cur:
                cur.execute(f"""
                    INSERT INTO clients ({_COLUNAS_CLIENTE})
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """, (
                    client.id,
                    client.company_id,
                    client.cpf,
                    client.full_name,
                    client.birth_date,
                    client.phone,
                    client.email,
                    client.gender,
                    client.address_city,
                    client.address_state,
                    client.internal_notes,
                    client.created_by,
                    client.is_active,
                    client.created_at,
                ))
            self.conn.commit()
        except pg_errors.UniqueViolation:
            self.conn.rollback()
            raise CpfJaCadastradoError(client.cpf)
        except psycopg2.Error:
            self.conn.rollback()
            raise
        return client

    def atualizar_cliente(self, client: Client) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    UPDATE clients
                    SET cpf = %s, full_name = %s, birth_date = %s, phone = %s, email = %s,
                        gender = %s, address_city = %s, address_state = %s,
                        internal_notes = %s, is_active = %s
                    WHERE id = %s
                """, (
                    client.cpf,
                    client.full_name,
                    client.birth_date,
                    client.phone,
                    client.email,
                    client.gender,
                    client.address_city,
                    client.address_state,
                    client.internal_notes,
                    client.is_active,
                    client.id,
                ))
            self.conn.commit()
        except pg_errors.UniqueViolation:
            self.conn.rollback()
            raise CpfJaCadastradoError(client.cpf)
        except psycopg2.Error:
            self.conn.rollback()
            raise

    def remover_cliente(self, client_id: str) -> None:
        self._executar("DELETE FROM clients WHERE id = %s", (client_id,))

    def cliente_possui_propostas(self, client_id: str) -> bool:
        return self._existe("SELECT 1 FROM proposals WHERE client_id = %s LIMIT 1", (client_id,))

    # =====================================================
    # 🏦 Bancos
    # =====================================================
    def buscar_banco(self, bank_id: str) -> Optional[Bank]:
        with self.conn.cursor() as cur:
            cur.execute(f"SELECT {_COLUNAS_BANCO} FROM banks WHERE id = %s", (bank_id,))
            row = cur.fetchone()
        return _banco(row) if row else None

    def listar_bancos(self, company_id: str, somente_ativos: bool = False) -> List[Bank]:
        query = f"SELECT {_COLUNAS_BANCO} FROM banks WHERE company_id = %s"
        if somente_ativos:
            query += " AND is_active"
        query += " ORDER BY name"
        with self.conn.cursor() as cur:
            cur.execute(query, (company_id,))
            rows = cur.fetchall()
        return [_banco(r) for r in rows]

    def criar_banco(self, bank: Bank) -> Bank:
        bank.id = bank.id or str(uuid.uuid4())
        self._executar(f"""
            INSERT INTO banks ({_COLUNAS_BANCO})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        """, (
            bank.id,
            bank.name,
            bank.code,
            bank.possui_api,
            bank.base_url,
            bank.company_id,
            bank.is_active,
            bank.priority,
        ))
        return bank

    def atualizar_banco(self, bank: Bank) -> None:
        self._executar("""
            UPDATE banks
            SET name = %s, code = %s, possui_api = %s, base_url = %s, is_active = %s, priority = %s
            WHERE id = %s
        """, (bank.name, bank.code, bank.possui_api, bank.base_url, bank.is_active, bank.priority, bank.id))

    def remover_banco(self, bank_id: str) -> None:
        self._executar("DELETE FROM banks WHERE id = %s", (bank_id,))

    def banco_possui_propostas(self, bank_id: str) -> bool:
        return self._existe("SELECT 1 FROM proposals WHERE bank_id = %s LIMIT 1", (bank_id,))
