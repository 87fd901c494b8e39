# tests/conftest.py

import os

# 🔹 precisa vir antes de qualquer import do app (settings e loggers são cacheados)
os.environ["LOG_TO_FILE"] = "false"
os.environ["JWT_SECRET_KEY"] = "segredo-de-teste"
os.environ["FACTA_API_KEY"] = "chave-teste"

import httpx
import pytest
from fastapi.testclient import TestClient

from authentication.domain.entities import AppRole
from authentication.utils.password_utils import gerar_hash_senha
from crm_api import dependencies
from crm_api.main import app
from fakes import (
    FakeAuditRepository,
    FakeFacta,
    FakeIdentityRepository,
    FakeProposalRepository,
    FakeRegistryRepository,
    FakeSalesRepository,
    FakeTenantRepository,
)
from proposals.infrastructure.facta_client import FactaClient
from provisioning.domain.entities import Company, CompanyStatus, Plano, Profile, RoleAssignment

SENHA_PADRAO = "senha123"
SENHA_HASH = gerar_hash_senha(SENHA_PADRAO)
FACTA_URL = "https://facta.test"


class Ambiente:
    """Agrupa os fakes de uma execução de teste e ajuda a montar cenários."""

    def __init__(self):
        self.identity = FakeIdentityRepository()
        self.tenant = FakeTenantRepository()
        self.audit = FakeAuditRepository()
        self.proposals = FakeProposalRepository()
        self.registry = FakeRegistryRepository(self.proposals)
        self.sales = FakeSalesRepository(self.tenant)
        self.facta = FakeFacta()

    def empresa(self, nome="Acme Consignados", cnpj="11222333000181", status=CompanyStatus.ACTIVE, max_users=2):
        empresa = Company(id=None, name=nome, cnpj=cnpj, status=status, plano=Plano.BASICO, max_users=max_users)
        self.tenant.criar_empresa(empresa)
        return empresa

    def usuario(self, email, role=None, company_id=None, full_name=None, com_perfil=True):
        identidade = self.identity.criar_identidade(email, SENHA_HASH, full_name or email.split("@")[0])
        if role is not None:
            self.tenant.inserir_role(RoleAssignment(user_id=identidade.id, role=AppRole(role), company_id=company_id))
        if com_perfil:
            self.tenant.criar_perfil(Profile(
                user_id=identidade.id,
                email=identidade.email,
                full_name=identidade.full_name,
                company_id=company_id,
            ))
        return identidade

    def limpar_escritas(self):
        self.tenant.escritas.clear()
        self.identity.criacoes = 0


@pytest.fixture
def env():
    return Ambiente()


@pytest.fixture
def client(env):
    app.dependency_overrides[dependencies.get_identity_repository] = lambda: env.identity
    app.dependency_overrides[dependencies.get_tenant_repository] = lambda: env.tenant
    app.dependency_overrides[dependencies.get_audit_repository] = lambda: env.audit
    app.dependency_overrides[dependencies.get_proposal_repository] = lambda: env.proposals
    app.dependency_overrides[dependencies.get_sales_repository] = lambda: env.sales
    app.dependency_overrides[dependencies.get_registry_repository] = lambda: env.registry
    app.dependency_overrides[dependencies.get_facta_client] = lambda: FactaClient(
        api_key="chave-teste",
        base_url_padrao=FACTA_URL,
        transport=httpx.MockTransport(env.facta.responder),
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
