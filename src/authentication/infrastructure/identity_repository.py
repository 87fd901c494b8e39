# authentication/infrastructure/identity_repository.py

import uuid
from datetime import datetime
from typing import Optional

import psycopg2
from psycopg2 import errors as pg_errors

from authentication.domain.entities import Identidade
from authentication.domain.repository_interface import IdentityRepositoryInterface
from utils.errors import IdentidadeJaExisteError

_COLUNAS = "id, email, senha_hash, full_name, email_confirmado, criado_em"


class IdentityRepository(IdentityRepositoryInterface):
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ Conexão com o banco de dados falhou e é None.")
        self.conn = conn

    def criar_identidade(self, email, senha_hash, full_name, email_confirmado=True) -> Identidade:
        identidade = Identidade(
            id=str(uuid.uuid4()),
            email=email.strip().lower(),
            senha_hash=senha_hash,
            full_name=full_name,
            email_confirmado=email_confirmado,
            criado_em=datetime.utcnow(),
        )
        query = f"""
        INSERT INTO auth_users ({_COLUNAS})
        VALUES (%s, %s, %s, %s, %s, %s)
        """
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, (
                    identidade.id,
                    identidade.email,
                    identidade.senha_hash,
                    identidade.full_name,
                    identidade.email_confirmado,
                    identidade.criado_em,
                ))
            self.conn.commit()
        except pg_errors.UniqueViolation:
            self.conn.rollback()
            raise IdentidadeJaExisteError(identidade.email)
        except psycopg2.Error:
            self.conn.rollback()
            raise
        return identidade

    def buscar_por_id(self, user_id: str) -> Optional[Identidade]:
        with self.conn.cursor() as cur:
            cur.execute(f"SELECT {_COLUNAS} FROM auth_users WHERE id = %s", (user_id,))
            row = cur.fetchone()
        return Identidade(*row) if row else None

    def buscar_por_email(self, email: str) -> Optional[Identidade]:
        with self.conn.cursor() as cur:
            cur.execute(
                f"SELECT {_COLUNAS} FROM auth_users WHERE email = %s LIMIT 1",
                (email.strip().lower(),),
            )
            row = cur.fetchone()
        return Identidade(*row) if row else None

    def atualizar_senha(self, user_id: str, senha_hash: str) -> None:
        with self.conn.cursor() as cur:
            cur.execute("UPDATE auth_users SET senha_hash = %s WHERE id = %s", (senha_hash, user_id))
        self.conn.commit()

    def remover_identidade(self, user_id: str) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute("DELETE FROM auth_users WHERE id = %s", (user_id,))
            self.conn.commit()
        except psycopg2.Error:
            self.conn.rollback()
            raise
