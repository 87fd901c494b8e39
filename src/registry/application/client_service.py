# registry/application/client_service.py

from dataclasses import asdict
from typing import Optional, Tuple

from audit.domain.entities import AuditEntry
from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import ADMIN_ROLES, PROPOSAL_ROLES, Identidade
from proposals.domain.entities import Client
from provisioning.application.authorization import (
    ContextoChamador,
    carregar_contexto,
    exigir_empresa,
    exigir_mesma_empresa,
    exigir_role,
)
from provisioning.domain.repository_interface import TenantRepositoryInterface
from registry.domain.cpf import cpf_valido, somente_digitos
from registry.domain.repository_interface import RegistryRepositoryInterface
from utils.errors import AuthorizationError, BusinessRuleError, CpfJaCadastradoError, NotFoundError, ValidationError
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("registry")

CAMPOS_EDITAVEIS = (
    "cpf",
    "full_name",
    "birth_date",
    "phone",
    "email",
    "gender",
    "address_city",
    "address_state",
    "internal_notes",
    "is_active",
)

OBRIGATORIOS = ("cpf", "full_name", "is_active")


def _normalizar(dados: dict) -> dict:
    """CPF e telefone guardados só com dígitos; UF em maiúsculas."""
    dados = dict(dados)
    if "cpf" in dados:
        if not cpf_valido(dados["cpf"]):
            raise ValidationError("CPF inválido")
        dados["cpf"] = somente_digitos(dados["cpf"])
    if dados.get("phone") is not None:
        dados["phone"] = somente_digitos(dados["phone"]) or None
    if dados.get("address_state"):
        dados["address_state"] = dados["address_state"].strip().upper()
    if dados.get("full_name") is not None:
        dados["full_name"] = dados["full_name"].strip()
    return dados


class ClientService:
    def __init__(
        self,
        tenant_repo: TenantRepositoryInterface,
        registry_repo: RegistryRepositoryInterface,
        audit_repo: AuditRepositoryInterface,
    ):
        self.tenant_repo = tenant_repo
        self.registry_repo = registry_repo
        self.audit_repo = audit_repo

    def _contexto(self, chamador: Identidade) -> Tuple[ContextoChamador, str]:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        exigir_role(contexto, PROPOSAL_ROLES, "Sem permissão para acessar o cadastro de clientes")
        return contexto, exigir_empresa(contexto)

    def _carregar(self, contexto: ContextoChamador, client_id: str) -> Client:
        cliente = self.registry_repo.buscar_cliente(client_id)
        if cliente is None:
            raise NotFoundError("Cliente não encontrado")
        exigir_mesma_empresa(contexto, cliente.company_id, "Cliente pertence a outra empresa")
        return cliente

    def listar(self, chamador: Identidade, busca: Optional[str] = None) -> list[dict]:
        _, company_id = self._contexto(chamador)
        return [asdict(c) for c in self.registry_repo.listar_clientes(company_id, busca)]

    def obter(self, chamador: Identidade, client_id: str) -> dict:
        contexto, _ = self._contexto(chamador)
        return asdict(self._carregar(contexto, client_id))

    def criar(self, chamador: Identidade, dados: dict) -> dict:
        _, company_id = self._contexto(chamador)
        dados = _normalizar(dados)

        if self.registry_repo.buscar_cliente_por_cpf(company_id, dados["cpf"]):
            raise CpfJaCadastradoError(dados["cpf"])

        cliente = self.registry_repo.criar_cliente(Client(
            id=None,
            company_id=company_id,
            created_by=chamador.id,
            **{campo: dados[campo] for campo in CAMPOS_EDITAVEIS if campo in dados},
        ))
        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=company_id,
            action="criar_cliente",
            resource="clientes",
            resource_id=cliente.id,
            new_data={"cpf": cliente.cpf, "full_name": cliente.full_name},
        ))
        logger.info(f"👤 Cliente {cliente.id} cadastrado na empresa {company_id} por {chamador.id}")
        return asdict(cliente)

    def atualizar(self, chamador: Identidade, client_id: str, alteracoes: dict) -> dict:
        contexto, _ = self._contexto(chamador)
        cliente = self._carregar(contexto, client_id)
        alteracoes = _normalizar({
            k: v for k, v in alteracoes.items()
            if k in CAMPOS_EDITAVEIS and not (v is None and k in OBRIGATORIOS)
        })

        novo_cpf = alteracoes.get("cpf")
        if novo_cpf and novo_cpf != cliente.cpf:
            outro = self.registry_repo.buscar_cliente_por_cpf(cliente.company_id, novo_cpf)
            if outro and outro.id != cliente.id:
                raise CpfJaCadastradoError(novo_cpf)

        anterior = {campo: getattr(cliente, campo) for campo in alteracoes}
        for campo, valor in alteracoes.items():
            setattr(cliente, campo, valor)
        self.registry_repo.atualizar_cliente(cliente)

        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=cliente.company_id,
            action="atualizar_cliente",
            resource="clientes",
            resource_id=cliente.id,
            old_data=anterior,
            new_data=alteracoes,
        ))
        logger.info(f"✏️ Cliente {cliente.id} atualizado por {chamador.id}")
        return asdict(cliente)

    def remover(self, chamador: Identidade, client_id: str) -> dict:
        contexto, _ = self._contexto(chamador)
        cliente = self._carregar(contexto, client_id)

        # Administradores removem qualquer cliente; demais apenas os que cadastraram
        if contexto.role not in ADMIN_ROLES and cliente.created_by != chamador.id:
            raise AuthorizationError("Apenas administradores ou quem cadastrou o cliente podem excluí-lo")
        if self.registry_repo.cliente_possui_propostas(cliente.id):
            raise BusinessRuleError("Cliente possui propostas vinculadas; desative-o em vez de excluir")

        self.registry_repo.remover_cliente(cliente.id)
        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=cliente.company_id,
            action="remover_cliente",
            resource="clientes",
            resource_id=cliente.id,
            old_data={"cpf": cliente.cpf, "full_name": cliente.full_name},
        ))
        logger.info(f"🗑️ Cliente {cliente.id} removido por {chamador.id}")
        return {"success": True, "message": "Cliente excluído com sucesso"}
