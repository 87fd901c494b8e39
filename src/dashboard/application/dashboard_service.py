# dashboard/application/dashboard_service.py

from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import Optional

import pandas as pd

from audit.domain.entities import AuditEntry
from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import ADMIN_ROLES, GESTAO_ROLES, Identidade
from dashboard.domain.entities import META_MENSAL_PADRAO, CovenantType, Sale, SaleStatus
from dashboard.domain.metrics import calcular_comissao, projecao_mensal, ranking_vendedores, resumo_mensal
from dashboard.domain.repository_interface import SalesRepositoryInterface
from provisioning.application.authorization import (
    ContextoChamador,
    carregar_contexto,
    exigir_empresa,
    exigir_role,
)
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.errors import AuthorizationError, NotFoundError
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("dashboard")

CAMPOS_VENDA = (
    "client_name",
    "covenant_type",
    "released_value",
    "commission_percentage",
    "sale_date",
    "status",
    "observations",
)


class DashboardService:
    def __init__(
        self,
        tenant_repo: TenantRepositoryInterface,
        sales_repo: SalesRepositoryInterface,
        audit_repo: AuditRepositoryInterface,
    ):
        self.tenant_repo = tenant_repo
        self.sales_repo = sales_repo
        self.audit_repo = audit_repo

    def _vendas(self, contexto: ContextoChamador, ano: int, mes: int) -> pd.DataFrame:
        company_id = exigir_empresa(contexto)
        # Gestores veem a empresa inteira; demais roles só as próprias vendas
        seller_id = None if contexto.role in GESTAO_ROLES else contexto.user_id
        return self.sales_repo.carregar_vendas_mes(company_id, ano, mes, seller_id=seller_id)

    def registrar_venda(
        self,
        chamador: Identidade,
        client_name: str,
        covenant_type: CovenantType,
        released_value,
        commission_percentage,
        sale_date: date,
        status: SaleStatus = SaleStatus.EM_ANDAMENTO,
        observations: Optional[str] = None,
    ) -> dict:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        company_id = exigir_empresa(contexto)

        fracao, comissao = calcular_comissao(released_value, commission_percentage)
        venda = self.sales_repo.registrar_venda(Sale(
            company_id=company_id,
            seller_id=chamador.id,
            client_name=client_name,
            covenant_type=covenant_type,
            released_value=released_value,
            commission_percentage=fracao,
            commission_value=comissao,
            sale_date=sale_date,
            status=status,
            observations=observations,
        ))
        logger.info(f"💰 Venda {venda.id} registrada por {chamador.id} (comissão {comissao})")

        return {
            "success": True,
            "data": {
                "id": venda.id,
                "commission_percentage": fracao,
                "commission_value": comissao,
                "status": venda.status.value,
            },
        }

    def resumo(self, chamador: Identidade, ano: int, mes: int, meta: Optional[float] = None) -> dict:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        meta = meta or self._meta(contexto, ano, mes)
        return resumo_mensal(self._vendas(contexto, ano, mes), ano, mes, meta)

    def projecao(self, chamador: Identidade, hoje: Optional[date] = None, meta: Optional[float] = None) -> dict:
        hoje = hoje or date.today()
        contexto = carregar_contexto(chamador, self.tenant_repo)
        meta = meta or self._meta(contexto, hoje.year, hoje.month)
        return projecao_mensal(self._vendas(contexto, hoje.year, hoje.month), hoje, meta)

    def ranking(self, chamador: Identidade, ano: int, mes: int) -> list:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        return ranking_vendedores(self._vendas(contexto, ano, mes), ano, mes)

    # =====================================================
    # 🎯 Meta mensal
    # =====================================================
    def _meta(self, contexto: ContextoChamador, ano: int, mes: int) -> float:
        """Meta gravada para o mês; sem registro vale a meta padrão."""
        company_id = exigir_empresa(contexto)
        meta = self.sales_repo.buscar_meta(company_id, ano, mes)
        return float(meta) if meta is not None else META_MENSAL_PADRAO

    def obter_meta(self, chamador: Identidade, ano: int, mes: int) -> dict:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        return {"ano": ano, "mes": mes, "meta": self._meta(contexto, ano, mes)}

    def definir_meta(self, chamador: Identidade, ano: int, mes: int, valor: Decimal) -> dict:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        exigir_role(contexto, ADMIN_ROLES, "Apenas administradores podem definir a meta mensal")
        company_id = exigir_empresa(contexto)

        anterior = self.sales_repo.buscar_meta(company_id, ano, mes)
        self.sales_repo.salvar_meta(company_id, ano, mes, valor)
        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=company_id,
            action="definir_meta",
            resource="metas_mensais",
            resource_id=f"{ano}-{mes:02d}",
            old_data={"target_value": anterior} if anterior is not None else None,
            new_data={"target_value": valor},
        ))
        return {"ano": ano, "mes": mes, "meta": float(valor)}

    # =====================================================
    # 💰 Vendas
    # =====================================================
    def _carregar_venda(self, contexto: ContextoChamador, sale_id: str) -> Sale:
        company_id = exigir_empresa(contexto)
        venda = self.sales_repo.buscar_venda(sale_id)
        if venda is None or venda.company_id != company_id:
            raise NotFoundError("Venda não encontrada")
        # Gestores alteram qualquer venda da empresa; demais roles só as próprias
        if contexto.role not in GESTAO_ROLES and venda.seller_id != contexto.user_id:
            raise AuthorizationError("Sem permissão para alterar vendas de outro vendedor")
        return venda

    def listar_vendas(self, chamador: Identidade, ano: Optional[int] = None, mes: Optional[int] = None) -> list:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        company_id = exigir_empresa(contexto)
        seller_id = None if contexto.role in GESTAO_ROLES else contexto.user_id
        vendas = self.sales_repo.listar_vendas(company_id, seller_id=seller_id, ano=ano, mes=mes)
        return [asdict(v) for v in vendas]

    def atualizar_venda(self, chamador: Identidade, sale_id: str, alteracoes: dict) -> dict:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        venda = self._carregar_venda(contexto, sale_id)
        alteracoes = {k: v for k, v in alteracoes.items() if k in CAMPOS_VENDA and v is not None}

        anterior = {
            "released_value": venda.released_value,
            "commission_value": venda.commission_value,
            "status": venda.status.value,
        }
        percentual = alteracoes.pop("commission_percentage", None)
        for campo, valor in alteracoes.items():
            setattr(venda, campo, valor)

        # Percentual chega de 0 a 100, como no cadastro; o armazenado é a fração
        if percentual is not None or "released_value" in alteracoes:
            if percentual is None:
                percentual = Decimal(str(venda.commission_percentage)) * 100
            venda.commission_percentage, venda.commission_value = calcular_comissao(
                venda.released_value, percentual
            )

        self.sales_repo.atualizar_venda(venda)
        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=venda.company_id,
            action="atualizar_venda",
            resource="vendas",
            resource_id=venda.id,
            old_data=anterior,
            new_data={
                "released_value": venda.released_value,
                "commission_value": venda.commission_value,
                "status": venda.status.value,
            },
        ))
        logger.info(f"✏️ Venda {venda.id} atualizada por {chamador.id}")
        return asdict(venda)

    def remover_venda(self, chamador: Identidade, sale_id: str) -> dict:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        venda = self._carregar_venda(contexto, sale_id)

        self.sales_repo.remover_venda(venda.id)
        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=venda.company_id,
            action="remover_venda",
            resource="vendas",
            resource_id=venda.id,
            old_data={
                "client_name": venda.client_name,
                "released_value": venda.released_value,
                "status": venda.status.value,
            },
        ))
        logger.info(f"🗑️ Venda {venda.id} removida por {chamador.id}")
        return {"success": True, "message": "Venda removida com sucesso"}
