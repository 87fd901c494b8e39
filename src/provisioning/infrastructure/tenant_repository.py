# provisioning/infrastructure/tenant_repository.py

import uuid
from datetime import datetime
from typing import List, Optional

import psycopg2

from authentication.domain.entities import AppRole
from provisioning.domain.entities import Company, CompanyStatus, Plano, Profile, RoleAssignment
from provisioning.domain.repository_interface import TenantRepositoryInterface

_COLUNAS_EMPRESA = "id, name, cnpj, email, phone, responsavel, status, plano, max_users, created_at"
_COLUNAS_PERFIL = "user_id, email, full_name, company_id, phone, is_active, id"


def _empresa(row) -> Company:
    (id_, name, cnpj, email, phone, responsavel, status, plano, max_users, created_at) = row
    return Company(
        id=str(id_),
        name=name,
        cnpj=cnpj,
        email=email,
        phone=phone,
        responsavel=responsavel,
        status=CompanyStatus(status),
        plano=Plano(plano),
        max_users=max_users,
        created_at=created_at,
    )


def _perfil(row) -> Profile:
    user_id, email, full_name, company_id, phone, is_active, id_ = row
    return Profile(
        user_id=str(user_id),
        email=email,
        full_name=full_name,
        company_id=str(company_id) if company_id else None,
        phone=phone,
        is_active=is_active,
        id=str(id_),
    )


class TenantRepository(TenantRepositoryInterface):
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ Conexão com o banco de dados falhou e é None.")
        self.conn = conn

    def _executar(self, query: str, params: tuple) -> int:
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, params)
                rowcount = cur.rowcount
            self.conn.commit()
            return rowcount
        except psycopg2.Error:
            self.conn.rollback()
            raise

    # =====================================================
    # 🏢 Empresas
    # =====================================================
    def buscar_empresa(self, company_id: str) -> Optional[Company]:
        with self.conn.cursor() as cur:
            cur.execute(f"SELECT {_COLUNAS_EMPRESA} FROM companies WHERE id = %s", (company_id,))
            row = cur.fetchone()
        return _empresa(row) if row else None

    def buscar_empresa_por_cnpj(self, cnpj: str) -> Optional[Company]:
        with self.conn.cursor() as cur:
            cur.execute(f"SELECT {_COLUNAS_EMPRESA} FROM companies WHERE cnpj = %s LIMIT 1", (cnpj,))
            row = cur.fetchone()
        return _empresa(row) if row else None

    def criar_empresa(self, company: Company) -> Company:
        company.id = company.id or str(uuid.uuid4())
        self._executar(f"""
            INSERT INTO companies ({_COLUNAS_EMPRESA})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        """, (
            company.id,
            company.name,
            company.cnpj,
            company.email,
            company.phone,
            company.responsavel,
            company.status.value,
            company.plano.value,
            company.max_users,
            company.created_at,
        ))
        return company

    def remover_empresa(self, company_id: str) -> None:
        self._executar("DELETE FROM companies WHERE id = %s", (company_id,))

    # =====================================================
    # 👤 Perfis
    # =====================================================
    def buscar_perfil(self, user_id: str) -> Optional[Profile]:
        with self.conn.cursor() as cur:
            cur.execute(f"SELECT {_COLUNAS_PERFIL} FROM profiles WHERE user_id = %s", (user_id,))
            row = cur.fetchone()
        return _perfil(row) if row else None

    def criar_perfil(self, profile: Profile) -> bool:
        profile.id = profile.id or str(uuid.uuid4())
        inseridos = self._executar("""
            INSERT INTO profiles (id, user_id, email, full_name, company_id, phone, is_active, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (user_id) DO NOTHING
        """, (
            profile.id,
            profile.user_id,
            profile.email,
            profile.full_name,
            profile.company_id,
            profile.phone,
            profile.is_active,
            datetime.utcnow(),
        ))
        return inseridos == 1

    def vincular_empresa_perfil(self, user_id: str, company_id: str) -> None:
        self._executar(
            "UPDATE profiles SET company_id = %s, updated_at = NOW() WHERE user_id = %s",
            (company_id, user_id),
        )

    def definir_perfil_ativo(self, user_id: str, ativo: bool) -> None:
        self._executar(
            "UPDATE profiles SET is_active = %s, updated_at = NOW() WHERE user_id = %s",
            (ativo, user_id),
        )

    def remover_perfil(self, user_id: str) -> None:
        self._executar("DELETE FROM profiles WHERE user_id = %s", (user_id,))

    def contar_perfis_ativos(self, company_id: str) -> int:
        with self.conn.cursor() as cur:
            cur.execute(
                "SELECT COUNT(*) FROM profiles WHERE company_id = %s AND is_active = TRUE",
                (company_id,),
            )
            return cur.fetchone()[0]

    def listar_perfis(self, company_id: str) -> List[Profile]:
        with self.conn.cursor() as cur:
            cur.execute(f"""
                SELECT {_COLUNAS_PERFIL}
                FROM profiles
                WHERE company_id = %s
                ORDER BY full_name
            """, (company_id,))
            rows = cur.fetchall()
        return [_perfil(r) for r in rows]

    # =====================================================
    # 🔐 Roles
    # =====================================================
    def buscar_role(self, user_id: str) -> Optional[RoleAssignment]:
        with self.conn.cursor() as cur:
            cur.execute("SELECT user_id, role, company_id FROM user_roles WHERE user_id = %s", (user_id,))
            row = cur.fetchone()
        if not row:
            return None
        return RoleAssignment(
            user_id=str(row[0]),
            role=AppRole(row[1]),
            company_id=str(row[2]) if row[2] else None,
        )

    def inserir_role(self, assignment: RoleAssignment) -> None:
        self._executar(
            "INSERT INTO user_roles (user_id, role, company_id) VALUES (%s, %s, %s)",
            (assignment.user_id, assignment.role.value, assignment.company_id),
        )

    def upsert_role(self, assignment: RoleAssignment) -> None:
        self._executar("""
            INSERT INTO user_roles (user_id, role, company_id)
            VALUES (%s, %s, %s)
            ON CONFLICT (user_id) DO UPDATE
                SET role = EXCLUDED.role, company_id = EXCLUDED.company_id
        """, (assignment.user_id, assignment.role.value, assignment.company_id))

    def remover_role(self, user_id: str) -> None:
        self._executar("DELETE FROM user_roles WHERE user_id = %s", (user_id,))
