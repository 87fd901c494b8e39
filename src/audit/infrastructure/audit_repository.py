# audit/infrastructure/audit_repository.py

from psycopg2.extras import Json

from audit.domain.entities import AuditEntry, IntegrationLog
from audit.domain.repository_interface import AuditRepositoryInterface
from utils.json_sanitize import clean_for_json


def _json(valor):
    return Json(clean_for_json(valor)) if valor is not None else None


class AuditRepository(AuditRepositoryInterface):
    """Tabelas append-only: apenas INSERT."""

    def __init__(self, conn):
        self.conn = conn

    def registrar_auditoria(self, entry: AuditEntry) -> None:
        with self.conn.cursor() as cur:
            cur.execute("""
                INSERT INTO audit_logs
                    (user_id, company_id, action, resource, resource_id, old_data, new_data, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            """, (
                entry.user_id,
                entry.company_id,
                entry.action,
                entry.resource,
                entry.resource_id,
                _json(entry.old_data),
                _json(entry.new_data),
                entry.created_at,
            ))
        self.conn.commit()

    def registrar_integracao(self, log: IntegrationLog) -> None:
        with self.conn.cursor() as cur:
            cur.execute("""
                INSERT INTO integration_logs
                    (company_id, provider, operation, status_code, request_data,
                     response_data, error_message, duration_ms, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            """, (
                log.company_id,
                log.provider,
                log.operation,
                log.status_code,
                _json(log.request_data),
                _json(log.response_data),
                log.error_message,
                log.duration_ms,
                log.created_at,
            ))
        self.conn.commit()
