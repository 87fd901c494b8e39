# proposals/application/submission_service.py

from typing import Optional

from audit.domain.entities import AuditEntry, IntegrationLog
from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import Identidade
from proposals.application.proposal_access import carregar_proposta_facta
from proposals.domain.entities import BankStatus, Proposal
from proposals.domain.facta_payload import montar_payload_facta
from proposals.domain.repository_interface import ProposalRepositoryInterface
from proposals.infrastructure.facta_client import FactaClient, FactaIndisponivelError, RespostaFacta
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.errors import BusinessRuleError, NotFoundError, UpstreamError
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("proposals")

PROVEDOR = "facta"
OPERACAO_ENVIO = "enviar_proposta"


class ProposalSubmissionService:
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

    async def enviar(self, chamador: Identidade, proposal_id: str, forcar_reenvio: bool = False) -> dict:
        _, proposta, banco = carregar_proposta_facta(
            chamador, proposal_id, self.tenant_repo, self.proposal_repo
        )

        if proposta.ja_enviada and not forcar_reenvio:
            raise BusinessRuleError(
                f"Proposta já enviada à Facta (protocolo {proposta.protocolo_banco}). "
                "Use forcar_reenvio para reenviar."
            )

        cliente = self.proposal_repo.buscar_cliente(proposta.client_id)
        if cliente is None:
            raise NotFoundError("Cliente da proposta não encontrado")

        payload = montar_payload_facta(proposta, cliente)
        logger.info(f"📤 Enviando proposta {proposta.id} para a Facta ({payload['tipo_operacao']})")

        resposta: Optional[RespostaFacta] = None
        erro_transporte: Optional[str] = None
        try:
            resposta = await self.facta_client.enviar_proposta(banco.base_url, payload)
        except FactaIndisponivelError as e:
            erro_transporte = e.message

        protocolo = resposta.campo("protocolo") if resposta else None
        if resposta is not None and resposta.ok and protocolo:
            return self._registrar_sucesso(chamador, proposta, payload, resposta, str(protocolo))

        mensagem = erro_transporte or (resposta.mensagem if resposta else None) or "Erro ao enviar proposta para a Facta"
        self._registrar_falha(chamador, proposta, payload, resposta, mensagem)
        raise UpstreamError(mensagem, details=resposta.conteudo if resposta else None)

    def _registrar_sucesso(
        self,
        chamador: Identidade,
        proposta: Proposal,
        payload: dict,
        resposta: RespostaFacta,
        protocolo: str,
    ) -> dict:
        anterior = {"bank_status": proposta.bank_status.value, "protocolo_banco": proposta.protocolo_banco}

        proposta.protocolo_banco = protocolo
        proposta.bank_status = BankStatus.EM_ANALISE
        proposta.payload_enviado = payload
        proposta.resposta_banco = resposta.conteudo
        proposta.erro_banco = None
        self.proposal_repo.salvar_resultado_envio(proposta)

        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=proposta.company_id,
            action="envio_facta",
            resource="proposals",
            resource_id=proposta.id,
            old_data=anterior,
            new_data={"bank_status": proposta.bank_status.value, "protocolo_banco": protocolo},
        ))
        self._log_integracao(proposta, payload, resposta, None)

        logger.info(f"✅ Proposta {proposta.id} aceita pela Facta. Protocolo: {protocolo}")
        return {
            "success": True,
            "protocolo": protocolo,
            "message": "Proposta enviada com sucesso para a Facta",
        }

    def _registrar_falha(
        self,
        chamador: Identidade,
        proposta: Proposal,
        payload: dict,
        resposta: Optional[RespostaFacta],
        mensagem: str,
    ) -> None:
        proposta.bank_status = BankStatus.NAO_ENVIADO
        proposta.payload_enviado = payload
        proposta.resposta_banco = resposta.conteudo if resposta else None
        proposta.erro_banco = mensagem
        self.proposal_repo.salvar_resultado_envio(proposta)

        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=proposta.company_id,
            action="erro_envio_facta",
            resource="proposals",
            resource_id=proposta.id,
            new_data={"erro": mensagem},
        ))
        self._log_integracao(proposta, payload, resposta, mensagem)

        logger.warning(f"⚠️ Facta rejeitou a proposta {proposta.id}: {mensagem}")

    def _log_integracao(self, proposta, payload, resposta, erro) -> None:
        self.audit_repo.registrar_integracao(IntegrationLog(
            provider=PROVEDOR,
            operation=OPERACAO_ENVIO,
            company_id=proposta.company_id,
            status_code=resposta.status_code if resposta else None,
            request_data=payload,
            response_data=resposta.conteudo if resposta else None,
            error_message=erro,
            duration_ms=resposta.duration_ms if resposta else None,
        ))
