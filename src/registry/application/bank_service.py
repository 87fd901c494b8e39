# registry/application/bank_service.py

from dataclasses import asdict

from audit.domain.entities import AuditEntry
from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import ADMIN_ROLES, Identidade
from proposals.domain.entities import Bank
from provisioning.application.authorization import (
    ContextoChamador,
    carregar_contexto,
    exigir_empresa,
    exigir_mesma_empresa,
    exigir_role,
)
from provisioning.domain.repository_interface import TenantRepositoryInterface
from registry.domain.repository_interface import RegistryRepositoryInterface
from utils.errors import BusinessRuleError, NotFoundError
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("registry")

CAMPOS_BANCO = ("name", "code", "possui_api", "base_url", "is_active", "priority")
OBRIGATORIOS = ("name", "possui_api", "is_active", "priority")


class BankService:
    """Bancos parceiros da empresa. Leitura para toda a equipe, escrita só para administradores."""

    def __init__(
        self,
        tenant_repo: TenantRepositoryInterface,
        registry_repo: RegistryRepositoryInterface,
        audit_repo: AuditRepositoryInterface,
    ):
        self.tenant_repo = tenant_repo
        self.registry_repo = registry_repo
        self.audit_repo = audit_repo

    def _contexto_admin(self, chamador: Identidade) -> ContextoChamador:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        exigir_role(contexto, ADMIN_ROLES, "Apenas administradores podem gerenciar bancos")
        return contexto

    def _carregar(self, contexto: ContextoChamador, bank_id: str) -> Bank:
        banco = self.registry_repo.buscar_banco(bank_id)
        if banco is None:
            raise NotFoundError("Banco não encontrado")
        exigir_mesma_empresa(contexto, banco.company_id, "Banco pertence a outra empresa")
        return banco

    def _auditar(self, chamador: Identidade, banco: Bank, acao: str, old_data=None, new_data=None) -> None:
        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=banco.company_id,
            action=acao,
            resource="bancos",
            resource_id=banco.id,
            old_data=old_data,
            new_data=new_data,
        ))

    def listar(self, chamador: Identidade, somente_ativos: bool = False) -> list[dict]:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        company_id = exigir_empresa(contexto)
        return [asdict(b) for b in self.registry_repo.listar_bancos(company_id, somente_ativos)]

    def criar(self, chamador: Identidade, dados: dict) -> dict:
        contexto = self._contexto_admin(chamador)
        company_id = exigir_empresa(contexto)

        banco = self.registry_repo.criar_banco(Bank(
            id=None,
            company_id=company_id,
            **{campo: dados[campo] for campo in CAMPOS_BANCO if campo in dados},
        ))
        self._auditar(chamador, banco, "criar_banco", new_data=asdict(banco))
        logger.info(f"🏦 Banco {banco.name} ({banco.id}) cadastrado na empresa {company_id}")
        return asdict(banco)

    def atualizar(self, chamador: Identidade, bank_id: str, alteracoes: dict) -> dict:
        contexto = self._contexto_admin(chamador)
        banco = self._carregar(contexto, bank_id)

        alteracoes = {
            k: v for k, v in alteracoes.items()
            if k in CAMPOS_BANCO and not (v is None and k in OBRIGATORIOS)
        }
        anterior = {campo: getattr(banco, campo) for campo in alteracoes}
        for campo, valor in alteracoes.items():
            setattr(banco, campo, valor)
        self.registry_repo.atualizar_banco(banco)

        self._auditar(chamador, banco, "atualizar_banco", old_data=anterior, new_data=alteracoes)
        logger.info(f"✏️ Banco {banco.id} atualizado por {chamador.id}")
        return asdict(banco)

    def remover(self, chamador: Identidade, bank_id: str) -> dict:
        contexto = self._contexto_admin(chamador)
        banco = self._carregar(contexto, bank_id)

        if self.registry_repo.banco_possui_propostas(banco.id):
            raise BusinessRuleError("Banco possui propostas vinculadas; desative-o em vez de excluir")

        self.registry_repo.remover_banco(banco.id)
        self._auditar(chamador, banco, "remover_banco", old_data={"name": banco.name, "code": banco.code})
        logger.info(f"🗑️ Banco {banco.id} removido por {chamador.id}")
        return {"success": True, "message": "Banco removido com sucesso"}
