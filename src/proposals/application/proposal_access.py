# proposals/application/proposal_access.py

from typing import Tuple

from authentication.domain.entities import PROPOSAL_ROLES, Identidade
from proposals.domain.entities import Bank, Proposal
from proposals.domain.repository_interface import ProposalRepositoryInterface
from provisioning.application.authorization import (
    ContextoChamador,
    carregar_contexto,
    exigir_mesma_empresa,
    exigir_role,
)
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.errors import BusinessRuleError, NotFoundError


def carregar_proposta_facta(
    chamador: Identidade,
    proposal_id: str,
    tenant_repo: TenantRepositoryInterface,
    proposal_repo: ProposalRepositoryInterface,
) -> Tuple[ContextoChamador, Proposal, Bank]:
    """
    Checagens comuns a envio e sincronização: role do chamador, existência da
    proposta, escopo de empresa e banco Facta com API habilitada.
    """
    contexto = carregar_contexto(chamador, tenant_repo)
    exigir_role(contexto, PROPOSAL_ROLES, "Sem permissão para operar propostas junto ao banco")

    proposta = proposal_repo.buscar_proposta(proposal_id)
    if proposta is None:
        raise NotFoundError("Proposta não encontrada")

    exigir_mesma_empresa(contexto, proposta.company_id, "Proposta pertence a outra empresa")

    banco = proposal_repo.buscar_banco(proposta.bank_id) if proposta.bank_id else None
    if banco is None or not banco.is_facta:
        raise BusinessRuleError("Banco não é Facta ou não possui integração via API")

    return contexto, proposta, banco
