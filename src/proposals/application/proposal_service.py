# proposals/application/proposal_service.py

from dataclasses import asdict
from enum import Enum
from typing import Optional

from audit.domain.entities import AuditEntry
from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import GESTAO_ROLES, PROPOSAL_ROLES, Identidade
from proposals.domain.entities import BankStatus, InternalStatus, Proposal
from proposals.domain.repository_interface import ProposalRepositoryInterface
from proposals.domain.simulacao import calcular_parcela
from provisioning.application.authorization import (
    ContextoChamador,
    carregar_contexto,
    exigir_empresa,
    exigir_mesma_empresa,
    exigir_role,
)
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.errors import AuthorizationError, BusinessRuleError, NotFoundError
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("proposals")

# Status aceitos na criação; os demais só via fluxo com o banco
STATUS_INICIAIS = {InternalStatus.RASCUNHO, InternalStatus.PRE_CADASTRADA}

CAMPOS_PROPOSTA = (
    "modality",
    "covenant",
    "requested_value",
    "term_months",
    "interest_rate",
    "bank_agency",
    "bank_account",
    "bank_account_type",
    "pix_key",
    "observations",
)


def _valor(valor):
    return valor.value if isinstance(valor, Enum) else valor


def _resumo(proposta: Proposal) -> dict:
    dados = asdict(proposta)
    dados["parcela_estimada"] = calcular_parcela(
        proposta.requested_value, proposta.interest_rate, proposta.term_months
    )
    return dados


class ProposalService:
    """Cadastro e consulta de propostas (o envio ao banco fica no ProposalSubmissionService)."""

    def __init__(
        self,
        tenant_repo: TenantRepositoryInterface,
        proposal_repo: ProposalRepositoryInterface,
        audit_repo: AuditRepositoryInterface,
    ):
        self.tenant_repo = tenant_repo
        self.proposal_repo = proposal_repo
        self.audit_repo = audit_repo

    def _contexto(self, chamador: Identidade) -> ContextoChamador:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        exigir_role(contexto, PROPOSAL_ROLES, "Sem permissão para operar propostas")
        return contexto

    def criar(
        self,
        chamador: Identidade,
        client_id: str,
        dados: dict,
        bank_id: Optional[str] = None,
        internal_status: InternalStatus = InternalStatus.RASCUNHO,
    ) -> dict:
        contexto = self._contexto(chamador)
        company_id = exigir_empresa(contexto)

        if InternalStatus(internal_status) not in STATUS_INICIAIS:
            raise BusinessRuleError("Proposta nova deve ser gravada como rascunho ou pré-cadastrada")

        cliente = self.proposal_repo.buscar_cliente(client_id)
        if cliente is None:
            raise NotFoundError("Cliente não encontrado")
        if cliente.company_id != company_id:
            raise AuthorizationError("Cliente pertence a outra empresa")
        if not cliente.is_active:
            raise BusinessRuleError("Cliente inativo")

        if bank_id:
            banco = self.proposal_repo.buscar_banco(bank_id)
            if banco is None:
                raise NotFoundError("Banco não encontrado")
            if banco.company_id != company_id:
                raise AuthorizationError("Banco pertence a outra empresa")
            if not banco.is_active:
                raise BusinessRuleError("Banco inativo")

        proposta = self.proposal_repo.criar_proposta(Proposal(
            id=None,
            company_id=company_id,
            client_id=cliente.id,
            seller_id=chamador.id,
            bank_id=bank_id,
            internal_status=InternalStatus(internal_status),
            bank_status=BankStatus.NAO_ENVIADO,
            **{campo: _valor(dados.get(campo)) for campo in CAMPOS_PROPOSTA},
        ))

        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=company_id,
            action="criar_proposta",
            resource="propostas",
            resource_id=proposta.id,
            new_data={
                "client_id": proposta.client_id,
                "bank_id": proposta.bank_id,
                "modality": proposta.modality,
                "requested_value": proposta.requested_value,
                "internal_status": proposta.internal_status.value,
            },
        ))
        logger.info(f"📝 Proposta {proposta.id} criada por {chamador.id} ({proposta.internal_status.value})")
        return _resumo(proposta)

    def listar(
        self,
        chamador: Identidade,
        internal_status: Optional[InternalStatus] = None,
        bank_status: Optional[BankStatus] = None,
    ) -> list[dict]:
        contexto = self._contexto(chamador)
        company_id = exigir_empresa(contexto)
        # Gestores veem a empresa inteira; vendedores só as próprias propostas
        seller_id = None if contexto.role in GESTAO_ROLES else chamador.id
        propostas = self.proposal_repo.listar_propostas(
            company_id,
            seller_id=seller_id,
            internal_status=internal_status,
            bank_status=bank_status,
        )
        return [_resumo(p) for p in propostas]

    def obter(self, chamador: Identidade, proposal_id: str) -> dict:
        contexto = self._contexto(chamador)
        proposta = self.proposal_repo.buscar_proposta(proposal_id)
        if proposta is None:
            raise NotFoundError("Proposta não encontrada")
        exigir_mesma_empresa(contexto, proposta.company_id, "Proposta pertence a outra empresa")
        if contexto.role not in GESTAO_ROLES and proposta.seller_id != chamador.id:
            raise AuthorizationError("Sem permissão para ver propostas de outro vendedor")
        return _resumo(proposta)
