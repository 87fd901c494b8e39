# registry/api/routes.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import Identidade
from authentication.utils.dependencies import get_current_user
from crm_api.dependencies import get_audit_repository, get_registry_repository, get_tenant_repository
from provisioning.domain.repository_interface import TenantRepositoryInterface
from registry.api.schemas import AtualizarBancoRequest, AtualizarClienteRequest, BancoRequest, ClienteRequest
from registry.application.bank_service import BankService
from registry.application.client_service import ClientService
from registry.domain.repository_interface import RegistryRepositoryInterface
from utils.json_sanitize import clean_for_json

router = APIRouter(tags=["Cadastros"])


def _client_service(
    tenant_repo: TenantRepositoryInterface = Depends(get_tenant_repository),
    registry_repo: RegistryRepositoryInterface = Depends(get_registry_repository),
    audit_repo: AuditRepositoryInterface = Depends(get_audit_repository),
) -> ClientService:
    return ClientService(tenant_repo, registry_repo, audit_repo)


def _bank_service(
    tenant_repo: TenantRepositoryInterface = Depends(get_tenant_repository),
    registry_repo: RegistryRepositoryInterface = Depends(get_registry_repository),
    audit_repo: AuditRepositoryInterface = Depends(get_audit_repository),
) -> BankService:
    return BankService(tenant_repo, registry_repo, audit_repo)


# =====================================================
# 👥 Clientes
# =====================================================
@router.get("/clients", summary="Listar clientes da empresa")
def listar_clientes(
    busca: Optional[str] = Query(None, max_length=200, description="Nome (parcial) ou CPF exato"),
    user: Identidade = Depends(get_current_user),
    service: ClientService = Depends(_client_service),
):
    return {"success": True, "data": clean_for_json(service.listar(user, busca))}


@router.post("/clients", summary="Cadastrar cliente")
def criar_cliente(
    body: ClienteRequest,
    user: Identidade = Depends(get_current_user),
    service: ClientService = Depends(_client_service),
):
    return {"success": True, "data": clean_for_json(service.criar(user, body.model_dump()))}


@router.get("/clients/{client_id}", summary="Detalhar cliente")
def obter_cliente(
    client_id: UUID,
    user: Identidade = Depends(get_current_user),
    service: ClientService = Depends(_client_service),
):
    return {"success": True, "data": clean_for_json(service.obter(user, str(client_id)))}


@router.patch("/clients/{client_id}", summary="Atualizar cliente")
def atualizar_cliente(
    client_id: UUID,
    body: AtualizarClienteRequest,
    user: Identidade = Depends(get_current_user),
    service: ClientService = Depends(_client_service),
):
    alteracoes = body.model_dump(exclude_unset=True)
    return {"success": True, "data": clean_for_json(service.atualizar(user, str(client_id), alteracoes))}


@router.delete("/clients/{client_id}", summary="Excluir cliente")
def remover_cliente(
    client_id: UUID,
    user: Identidade = Depends(get_current_user),
    service: ClientService = Depends(_client_service),
):
    return service.remover(user, str(client_id))


# =====================================================
# 🏦 Bancos
# =====================================================
@router.get("/banks", summary="Listar bancos da empresa")
def listar_bancos(
    ativos: bool = Query(False, description="Somente bancos ativos"),
    user: Identidade = Depends(get_current_user),
    service: BankService = Depends(_bank_service),
):
    return {"success": True, "data": service.listar(user, somente_ativos=ativos)}


@router.post("/banks", summary="Cadastrar banco")
def criar_banco(
    body: BancoRequest,
    user: Identidade = Depends(get_current_user),
    service: BankService = Depends(_bank_service),
):
    return {"success": True, "data": service.criar(user, body.model_dump())}


@router.patch("/banks/{bank_id}", summary="Atualizar banco")
def atualizar_banco(
    bank_id: UUID,
    body: AtualizarBancoRequest,
    user: Identidade = Depends(get_current_user),
    service: BankService = Depends(_bank_service),
):
    return {"success": True, "data": service.atualizar(user, str(bank_id), body.model_dump(exclude_unset=True))}


@router.delete("/banks/{bank_id}", summary="Remover banco")
def remover_banco(
    bank_id: UUID,
    user: Identidade = Depends(get_current_user),
    service: BankService = Depends(_bank_service),
):
    return service.remover(user, str(bank_id))
