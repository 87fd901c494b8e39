# provisioning/application/company_creation_service.py

import re
from dataclasses import dataclass
from typing import Optional

from audit.domain.entities import AuditEntry
from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import SUPER_ADMIN_ROLES, AppRole, Identidade
from authentication.domain.repository_interface import IdentityRepositoryInterface
from authentication.utils.password_utils import gerar_hash_senha
from provisioning.application.authorization import carregar_contexto, exigir_role
from provisioning.domain.entities import (
    MAX_USERS_PADRAO,
    Company,
    CompanyStatus,
    Plano,
    Profile,
    RoleAssignment,
)
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.errors import BusinessRuleError, UnexpectedError, ValidationError
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("provisioning")

SENHA_MINIMA_ADMIN = 8
MAX_USERS_LIMITE = 100
EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _somente_digitos(valor: Optional[str]) -> str:
    return re.sub(r"\D", "", valor or "")


def _validar_dados(dados: "DadosNovaEmpresa") -> None:
    # 🔹 mesmas regras do CreateCompanyRequest, valendo também para o CLI
    erros = []
    if not 2 <= len((dados.company_name or "").strip()) <= 100:
        erros.append("company_name: informe entre 2 e 100 caracteres")
    if len(_somente_digitos(dados.cnpj)) != 14:
        erros.append("cnpj: CNPJ inválido. Informe 14 dígitos.")
    if not EMAIL_REGEX.match((dados.admin_email or "").strip()):
        erros.append("admin_email: email inválido")
    if not dados.admin_password or len(dados.admin_password) < SENHA_MINIMA_ADMIN:
        erros.append(f"admin_password: a senha deve ter no mínimo {SENHA_MINIMA_ADMIN} caracteres")
    if not 2 <= len((dados.admin_name or "").strip()) <= 100:
        erros.append("admin_name: informe entre 2 e 100 caracteres")
    if not 1 <= dados.max_users <= MAX_USERS_LIMITE:
        erros.append(f"max_users: informe um valor entre 1 e {MAX_USERS_LIMITE}")
    if erros:
        raise ValidationError("; ".join(erros))


@dataclass
class _EstadoAdmin:
    """Role e vínculo de empresa de uma identidade reaproveitada, antes da migração."""
    user_id: str
    role: Optional[RoleAssignment]
    perfil: Optional[Profile]


@dataclass
class DadosNovaEmpresa:
    company_name: str
    cnpj: str
    admin_email: str
    admin_password: str
    admin_name: str
    company_email: Optional[str] = None
    company_phone: Optional[str] = None
    responsavel: Optional[str] = None
    plano: Plano = Plano.BASICO
    max_users: int = MAX_USERS_PADRAO
    confirmar_migracao_admin: bool = False


class CompanyCreationService:
    """Onboarding de tenant (empresa + primeiro administrador), restrito a super admins."""

    def __init__(
        self,
        tenant_repo: TenantRepositoryInterface,
        identity_repo: IdentityRepositoryInterface,
        audit_repo: AuditRepositoryInterface,
    ):
        self.tenant_repo = tenant_repo
        self.identity_repo = identity_repo
        self.audit_repo = audit_repo

    def criar_empresa(self, chamador: Identidade, dados: DadosNovaEmpresa) -> dict:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        exigir_role(contexto, SUPER_ADMIN_ROLES, "Acesso negado. Apenas Super Admin pode criar empresas.")
        logger.info(f"Permissão confirmada para {chamador.id}. Role: {contexto.role.value}")
        return self.executar_criacao(chamador.id, dados)

    def executar_criacao(self, solicitante_id: str, dados: DadosNovaEmpresa) -> dict:
        """Fluxo sem checagem de role; usado pela rota (após checagem) e pelo CLI de bootstrap."""
        _validar_dados(dados)
        cnpj = _somente_digitos(dados.cnpj)

        existente = self.tenant_repo.buscar_empresa_por_cnpj(cnpj)
        if existente:
            logger.warning(f"⚠️ CNPJ duplicado: {cnpj} Empresa: {existente.name}")
            raise BusinessRuleError(f"CNPJ já cadastrado para a empresa: {existente.name}")

        admin_existente = self.identity_repo.buscar_por_email(dados.admin_email)
        if admin_existente and not dados.confirmar_migracao_admin:
            raise BusinessRuleError(
                f"O email {dados.admin_email} já possui conta. Para mover esse usuário para a nova "
                "empresa como administrador, confirme a migração (confirmar_migracao_admin=true)."
            )

        # 1. Empresa
        logger.info(f"🏢 Criando empresa: {dados.company_name}")
        empresa = self.tenant_repo.criar_empresa(Company(
            id=None,
            name=dados.company_name,
            cnpj=cnpj,
            email=dados.company_email or None,
            phone=_somente_digitos(dados.company_phone) or None,
            responsavel=dados.responsavel or None,
            status=CompanyStatus.ACTIVE,
            plano=dados.plano,
            max_users=dados.max_users,
        ))

        # 2. Administrador (novo ou reaproveitado)
        estado_anterior = None
        if admin_existente:
            admin = admin_existente
            admin_criado = False
            estado_anterior = _EstadoAdmin(
                user_id=admin.id,
                role=self.tenant_repo.buscar_role(admin.id),
                perfil=self.tenant_repo.buscar_perfil(admin.id),
            )
            logger.info(f"♻️ Reaproveitando identidade existente {admin.id} como admin de {empresa.id}")
        else:
            try:
                admin = self.identity_repo.criar_identidade(
                    email=dados.admin_email,
                    senha_hash=gerar_hash_senha(dados.admin_password),
                    full_name=dados.admin_name,
                    email_confirmado=True,
                )
            except Exception as e:
                logger.error(f"❌ Erro ao criar admin: {e}")
                self.tenant_repo.remover_empresa(empresa.id)
                logger.info(f"↩️ Rollback: empresa {empresa.id} removida")
                mensagem = e.message if isinstance(e, ValidationError) else str(e)
                raise BusinessRuleError(f"Erro ao criar administrador: {mensagem}")
            admin_criado = True

        # 3. Role + perfil
        try:
            self.tenant_repo.upsert_role(RoleAssignment(
                user_id=admin.id,
                role=AppRole.ADMINISTRADOR,
                company_id=empresa.id,
            ))
            perfil = self.tenant_repo.buscar_perfil(admin.id)
            if perfil is None:
                self.tenant_repo.criar_perfil(Profile(
                    user_id=admin.id,
                    email=admin.email,
                    full_name=dados.admin_name,
                    company_id=empresa.id,
                ))
            else:
                self.tenant_repo.vincular_empresa_perfil(admin.id, empresa.id)
        except Exception as e:
            logger.error(f"❌ Erro ao vincular admin {admin.id} à empresa {empresa.id}: {e}")
            if admin_criado:
                self._desfazer(empresa, admin_novo=admin)
            else:
                self._desfazer(empresa, estado_anterior=estado_anterior)
            raise UnexpectedError(f"Erro ao vincular administrador à empresa: {e}")

        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=solicitante_id,
            company_id=empresa.id,
            action="criar_empresa",
            resource="empresas",
            resource_id=empresa.id,
            new_data={
                "name": empresa.name,
                "cnpj": empresa.cnpj,
                "plano": empresa.plano.value,
                "max_users": empresa.max_users,
                "admin_id": admin.id,
                "admin_reutilizado": not admin_criado,
            },
        ))

        logger.info(f"✅ Empresa {empresa.id} e admin {admin.id} criados com sucesso")
        return {
            "success": True,
            "message": f'Empresa "{empresa.name}" criada com sucesso. Admin: {admin.email}',
            "data": {
                "company_id": empresa.id,
                "company_name": empresa.name,
                "admin_email": admin.email,
                "admin_reutilizado": not admin_criado,
            },
        }

    def _desfazer(
        self,
        empresa: Company,
        admin_novo: Optional[Identidade] = None,
        estado_anterior: Optional[_EstadoAdmin] = None,
    ) -> None:
        if estado_anterior:
            self._restaurar_admin(estado_anterior)
        try:
            if admin_novo:
                self.tenant_repo.remover_perfil(admin_novo.id)
                self.tenant_repo.remover_role(admin_novo.id)
                self.identity_repo.remover_identidade(admin_novo.id)
            self.tenant_repo.remover_empresa(empresa.id)
            logger.info(f"↩️ Rollback: empresa {empresa.id} removida")
        except Exception as e:
            logger.error(f"❌ Falha no rollback da empresa {empresa.id}: {e}")

    def _restaurar_admin(self, estado: _EstadoAdmin) -> None:
        # Role antes do perfil: sem ela o usuário perde acesso à empresa de origem
        try:
            if estado.role:
                self.tenant_repo.upsert_role(estado.role)
            else:
                self.tenant_repo.remover_role(estado.user_id)
            logger.info(f"↩️ Rollback: role de {estado.user_id} restaurada")
        except Exception as e:
            logger.error(f"❌ Falha ao restaurar role de {estado.user_id}: {e}")

        try:
            if estado.perfil is None:
                self.tenant_repo.remover_perfil(estado.user_id)
            else:
                atual = self.tenant_repo.buscar_perfil(estado.user_id)
                if atual and atual.company_id != estado.perfil.company_id:
                    self.tenant_repo.vincular_empresa_perfil(estado.user_id, estado.perfil.company_id)
        except Exception as e:
            logger.error(f"❌ Falha ao restaurar perfil de {estado.user_id}: {e}")
