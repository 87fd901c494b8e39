# proposals/api/routes.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import Identidade
from authentication.utils.dependencies import get_current_user
from crm_api.dependencies import (
    get_audit_repository,
    get_facta_client,
    get_proposal_repository,
    get_tenant_repository,
)
from proposals.api.schemas import EnviarPropostaRequest, NovaPropostaRequest, SincronizarStatusRequest
from proposals.application.proposal_service import ProposalService
from proposals.application.status_sync_service import StatusSyncService
from proposals.application.submission_service import ProposalSubmissionService
from proposals.domain.entities import BankStatus, InternalStatus
from proposals.domain.repository_interface import ProposalRepositoryInterface
from proposals.infrastructure.facta_client import FactaClient
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.json_sanitize import clean_for_json

router = APIRouter(tags=["Propostas"])


@router.post("/enviar-proposta-facta", summary="Enviar proposta para a Facta")
async def enviar_proposta_facta(
    body: EnviarPropostaRequest,
    user: Identidade = Depends(get_current_user),
    tenant_repo: TenantRepositoryInterface = Depends(get_tenant_repository),
    proposal_repo: ProposalRepositoryInterface = Depends(get_proposal_repository),
    audit_repo: AuditRepositoryInterface = Depends(get_audit_repository),
    facta_client: FactaClient = Depends(get_facta_client),
):
    service = ProposalSubmissionService(tenant_repo, proposal_repo, audit_repo, facta_client)
    return await service.enviar(user, str(body.proposal_id), body.forcar_reenvio)


@router.post("/sincronizar-status-facta", summary="Sincronizar status da proposta na Facta")
async def sincronizar_status_facta(
    body: SincronizarStatusRequest,
    user: Identidade = Depends(get_current_user),
    tenant_repo: TenantRepositoryInterface = Depends(get_tenant_repository),
    proposal_repo: ProposalRepositoryInterface = Depends(get_proposal_repository),
    audit_repo: AuditRepositoryInterface = Depends(get_audit_repository),
    facta_client: FactaClient = Depends(get_facta_client),
):
    service = StatusSyncService(tenant_repo, proposal_repo, audit_repo, facta_client)
    return await service.sincronizar(user, str(body.proposal_id))


def _proposal_service(
    tenant_repo: TenantRepositoryInterface = Depends(get_tenant_repository),
    proposal_repo: ProposalRepositoryInterface = Depends(get_proposal_repository),
    audit_repo: AuditRepositoryInterface = Depends(get_audit_repository),
) -> ProposalService:
    return ProposalService(tenant_repo, proposal_repo, audit_repo)


@router.post("/proposals", summary="Cadastrar proposta")
def criar_proposta(
    body: NovaPropostaRequest,
    user: Identidade = Depends(get_current_user),
    service: ProposalService = Depends(_proposal_service),
):
    dados = body.model_dump(exclude={"client_id", "bank_id", "internal_status"})
    proposta = service.criar(
        user,
        str(body.client_id),
        dados,
        bank_id=str(body.bank_id) if body.bank_id else None,
        internal_status=InternalStatus(body.internal_status),
    )
    return {"success": True, "data": clean_for_json(proposta)}


@router.get("/proposals", summary="Listar propostas")
def listar_propostas(
    internal_status: Optional[InternalStatus] = Query(None),
    bank_status: Optional[BankStatus] = Query(None),
    user: Identidade = Depends(get_current_user),
    service: ProposalService = Depends(_proposal_service),
):
    propostas = service.listar(user, internal_status=internal_status, bank_status=bank_status)
    return {"success": True, "data": clean_for_json(propostas)}


@router.get("/proposals/{proposal_id}", summary="Detalhar proposta")
def obter_proposta(
    proposal_id: UUID,
    user: Identidade = Depends(get_current_user),
    service: ProposalService = Depends(_proposal_service),
):
    return {"success": True, "data": clean_for_json(service.obter(user, str(proposal_id)))}
