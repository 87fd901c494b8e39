# proposals/application/status_sync_service.py

from audit.domain.entities import IntegrationLog
from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import Identidade
from proposals.application.proposal_access import carregar_proposta_facta
from proposals.domain.repository_interface import ProposalRepositoryInterface
from proposals.domain.status_mapping import mapear_status_facta
from proposals.infrastructure.facta_client import FactaClient, FactaIndisponivelError
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.errors import BusinessRuleError, UpstreamError
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("proposals")


class StatusSyncService:
    def __init__(
        self,
        tenant_repo: TenantRepositoryInterface,
        proposal_repo: ProposalRepositoryInterface,
        audit_repo: AuditRepositoryInterface,
        facta_client: FactaClient,
    ):
        self.tenant_repo = tenant_repo
        self.proposal_repo = proposal_repo
        self.audit_repo = audit_repo
        self.facta_client = facta_client

    async def sincronizar(self, chamador: Identidade, proposal_id: str) -> dict:
        _, proposta, banco = carregar_proposta_facta(
            chamador, proposal_id, self.tenant_repo, self.proposal_repo
        )

        if not proposta.protocolo_banco:
            raise BusinessRuleError("Proposta não possui protocolo do banco")

        try:
            resposta = await self.facta_client.consultar_status(banco.base_url, proposta.protocolo_banco)
        except FactaIndisponivelError as e:
            self._log_integracao(proposta, None, e.message)
            raise

        if not resposta.ok:
            mensagem = resposta.mensagem or "Erro ao consultar status na Facta"
            self._log_integracao(proposta, resposta, mensagem)
            raise UpstreamError(mensagem, details=resposta.conteudo)

        status_externo = resposta.campo("status")
        novo_status = mapear_status_facta(status_externo, proposta.bank_status)
        self.proposal_repo.atualizar_status_banco(proposta.id, novo_status, resposta.conteudo)
        self._log_integracao(proposta, resposta, None)

        if novo_status != proposta.bank_status:
            logger.info(f"🔄 Proposta {proposta.id}: {proposta.bank_status.value} → {novo_status.value}")
        else:
            logger.info(f"🔄 Proposta {proposta.id} sem mudança de status (Facta: {status_externo})")

        return {
            "success": True,
            "status": novo_status.value,
            "status_banco": status_externo,
            "data": resposta.conteudo,
        }

    def _log_integracao(self, proposta, resposta, erro) -> None:
        self.audit_repo.registrar_integracao(IntegrationLog(
            provider="facta",
            operation="consultar_status",
            company_id=proposta.company_id,
            status_code=resposta.status_code if resposta else None,
            request_data={"protocolo": proposta.protocolo_banco},
            response_data=resposta.conteudo if resposta else None,
            error_message=erro,
            duration_ms=resposta.duration_ms if resposta else None,
        ))
