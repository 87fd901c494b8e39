# dashboard/api/routes.py

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import Identidade
from authentication.utils.dependencies import get_current_user
from crm_api.dependencies import get_audit_repository, get_sales_repository, get_tenant_repository
from dashboard.api.schemas import AtualizarVendaRequest, MetaMensalRequest, NovaVendaRequest
from dashboard.application.dashboard_service import DashboardService
from dashboard.domain.repository_interface import SalesRepositoryInterface
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.json_sanitize import clean_for_json

router = APIRouter(tags=["Vendas e Dashboard"])


def _service(
    tenant_repo: TenantRepositoryInterface = Depends(get_tenant_repository),
    sales_repo: SalesRepositoryInterface = Depends(get_sales_repository),
    audit_repo: AuditRepositoryInterface = Depends(get_audit_repository),
) -> DashboardService:
    return DashboardService(tenant_repo, sales_repo, audit_repo)


@router.post("/sales", summary="Registrar venda")
def registrar_venda(
    body: NovaVendaRequest,
    user: Identidade = Depends(get_current_user),
    service: DashboardService = Depends(_service),
):
    return clean_for_json(service.registrar_venda(user, **body.model_dump()))


@router.get("/sales", summary="Listar vendas (mais recentes primeiro)")
def listar_vendas(
    ano: Optional[int] = Query(None, ge=2000, le=2100),
    mes: Optional[int] = Query(None, ge=1, le=12),
    user: Identidade = Depends(get_current_user),
    service: DashboardService = Depends(_service),
):
    return {"success": True, "data": clean_for_json(service.listar_vendas(user, ano, mes))}


@router.patch("/sales/{sale_id}", summary="Atualizar venda")
def atualizar_venda(
    sale_id: UUID,
    body: AtualizarVendaRequest,
    user: Identidade = Depends(get_current_user),
    service: DashboardService = Depends(_service),
):
    venda = service.atualizar_venda(user, str(sale_id), body.model_dump(exclude_unset=True))
    return {"success": True, "data": clean_for_json(venda)}


@router.delete("/sales/{sale_id}", summary="Remover venda")
def remover_venda(
    sale_id: UUID,
    user: Identidade = Depends(get_current_user),
    service: DashboardService = Depends(_service),
):
    return service.remover_venda(user, str(sale_id))


@router.get("/dashboard/meta", summary="Meta mensal da empresa")
def obter_meta(
    ano: Optional[int] = Query(None, ge=2000, le=2100),
    mes: Optional[int] = Query(None, ge=1, le=12),
    user: Identidade = Depends(get_current_user),
    service: DashboardService = Depends(_service),
):
    hoje = date.today()
    return {"success": True, "data": service.obter_meta(user, ano or hoje.year, mes or hoje.month)}


@router.put("/dashboard/meta", summary="Definir meta mensal da empresa")
def definir_meta(
    body: MetaMensalRequest,
    user: Identidade = Depends(get_current_user),
    service: DashboardService = Depends(_service),
):
    return {"success": True, "data": service.definir_meta(user, body.ano, body.mes, body.target_value)}


@router.get("/dashboard/resumo", summary="Indicadores do mês")
def resumo(
    ano: Optional[int] = Query(None, ge=2000, le=2100),
    mes: Optional[int] = Query(None, ge=1, le=12),
    meta: Optional[float] = Query(None, gt=0, description="Sobrescreve a meta gravada para o mês (R$)"),
    user: Identidade = Depends(get_current_user),
    service: DashboardService = Depends(_service),
):
    hoje = date.today()
    return {"success": True, "data": service.resumo(user, ano or hoje.year, mes or hoje.month, meta)}


@router.get("/dashboard/projecao", summary="Projeção de vendas até o fim do mês")
def projecao(
    meta: Optional[float] = Query(None, gt=0, description="Sobrescreve a meta gravada para o mês (R$)"),
    user: Identidade = Depends(get_current_user),
    service: DashboardService = Depends(_service),
):
    return {"success": True, "data": service.projecao(user, meta=meta)}


@router.get("/dashboard/ranking", summary="Ranking de vendedores do mês")
def ranking(
    ano: Optional[int] = Query(None, ge=2000, le=2100),
    mes: Optional[int] = Query(None, ge=1, le=12),
    user: Identidade = Depends(get_current_user),
    service: DashboardService = Depends(_service),
):
    hoje = date.today()
    return {"success": True, "data": service.ranking(user, ano or hoje.year, mes or hoje.month)}
