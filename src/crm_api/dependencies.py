# crm_api/dependencies.py

from fastapi import Depends

from audit.infrastructure.audit_repository import AuditRepository
from authentication.infrastructure.database_connection import obter_conexao
from authentication.infrastructure.identity_repository import IdentityRepository
from crm_api.config import get_settings
from dashboard.infrastructure.sales_repository import SalesRepository
from proposals.infrastructure.facta_client import FactaClient
from proposals.infrastructure.proposal_repository import ProposalRepository
from provisioning.infrastructure.tenant_repository import TenantRepository
from registry.infrastructure.registry_repository import RegistryRepository

# 🔹 Fábricas de repositórios por requisição (substituídas nos testes via dependency_overrides)


def get_identity_repository(conn=Depends(obter_conexao)) -> IdentityRepository:
    return IdentityRepository(conn)


def get_tenant_repository(conn=Depends(obter_conexao)) -> TenantRepository:
    return TenantRepository(conn)


def get_audit_repository(conn=Depends(obter_conexao)) -> AuditRepository:
    return AuditRepository(conn)


def get_proposal_repository(conn=Depends(obter_conexao)) -> ProposalRepository:
    return ProposalRepository(conn)


def get_sales_repository(conn=Depends(obter_conexao)) -> SalesRepository:
    return SalesRepository(conn)


def get_registry_repository(conn=Depends(obter_conexao)) -> RegistryRepository:
    return RegistryRepository(conn)


def get_facta_client() -> FactaClient:
    settings = get_settings()
    return FactaClient(
        api_key=settings.FACTA_API_KEY,
        base_url_padrao=settings.FACTA_BASE_URL,
        timeout=settings.FACTA_TIMEOUT,
    )
