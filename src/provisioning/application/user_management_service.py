# provisioning/application/user_management_service.py

from typing import Optional

from audit.domain.entities import AuditEntry
from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import ADMIN_ROLES, AppRole, Identidade
from authentication.domain.repository_interface import IdentityRepositoryInterface
from authentication.utils.password_utils import gerar_hash_senha, validar_senha
from provisioning.application.authorization import (
    carregar_contexto,
    exigir_empresa,
    exigir_role,
)
from provisioning.domain.entities import CompanyStatus, Profile, RoleAssignment
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.errors import (
    AuthorizationError,
    BusinessRuleError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
)
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("provisioning")

ROLES_CADASTRAVEIS = frozenset({AppRole.VENDEDOR, AppRole.ADMINISTRADOR})


class UserManagementService:
    def __init__(
        self,
        tenant_repo: TenantRepositoryInterface,
        identity_repo: IdentityRepositoryInterface,
        audit_repo: AuditRepositoryInterface,
    ):
        self.tenant_repo = tenant_repo
        self.identity_repo = identity_repo
        self.audit_repo = audit_repo

    # =====================================================
    # ➕ Adicionar colaborador
    # =====================================================
    def adicionar_usuario(
        self,
        chamador: Identidade,
        email: str,
        senha: str,
        full_name: str,
        role: AppRole,
        phone: Optional[str] = None,
    ) -> dict:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        exigir_role(contexto, ADMIN_ROLES, "Apenas administradores podem adicionar usuários")

        if role not in ROLES_CADASTRAVEIS:
            raise ValidationError("Role inválida. Use 'vendedor' ou 'administrador'")
        validar_senha(senha)

        # A empresa vem sempre do perfil do chamador
        company_id = exigir_empresa(contexto)
        empresa = self.tenant_repo.buscar_empresa(company_id)
        if empresa is None:
            raise NotFoundError("Empresa não encontrada")

        if empresa.status == CompanyStatus.SUSPENDED:
            raise BusinessRuleError(
                "Empresa suspensa. Regularize a assinatura para adicionar usuários.", status_code=403
            )
        if empresa.status == CompanyStatus.CANCELED:
            raise BusinessRuleError(
                "Empresa cancelada. Não é possível adicionar usuários.", status_code=403
            )

        ativos = self.tenant_repo.contar_perfis_ativos(company_id)
        if ativos >= empresa.max_users:
            raise BusinessRuleError(
                f"Limite de {empresa.max_users} usuários atingido para o plano {empresa.plano.value}. "
                "Faça upgrade do plano para adicionar mais usuários."
            )

        novo = self.identity_repo.criar_identidade(
            email=email,
            senha_hash=gerar_hash_senha(senha),
            full_name=full_name,
            email_confirmado=True,
        )
        logger.info(f"👤 Identidade {novo.id} criada por {chamador.id} na empresa {company_id}")

        try:
            self.tenant_repo.inserir_role(RoleAssignment(user_id=novo.id, role=role, company_id=company_id))

            # O perfil pode já ter sido criado por trigger no banco
            perfil = self.tenant_repo.buscar_perfil(novo.id)
            if perfil is None:
                self.tenant_repo.criar_perfil(Profile(
                    user_id=novo.id,
                    email=novo.email,
                    full_name=full_name,
                    company_id=company_id,
                    phone=phone,
                ))
            elif perfil.company_id != company_id:
                self.tenant_repo.vincular_empresa_perfil(novo.id, company_id)
        except Exception as e:
            logger.error(f"❌ Erro ao vincular usuário {novo.id}: {e}")
            self._desfazer_criacao(novo.id)
            raise UnexpectedError("Erro ao criar usuário. Nenhuma alteração foi mantida.")

        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=company_id,
            action="criar_usuario",
            resource="usuarios",
            resource_id=novo.id,
            new_data={"email": novo.email, "full_name": full_name, "role": role.value},
        ))

        return {
            "success": True,
            "message": f"Usuário {novo.email} criado com a role: {role.value}",
            "data": {"user_id": novo.id, "email": novo.email, "role": role.value},
        }

    def _desfazer_criacao(self, user_id: str) -> None:
        for passo in (self.tenant_repo.remover_perfil, self.tenant_repo.remover_role,
                      self.identity_repo.remover_identidade):
            try:
                passo(user_id)
            except Exception as e:
                logger.error(f"❌ Falha no rollback ({passo.__name__}) para {user_id}: {e}")

    # =====================================================
    # 🗑️ Remover colaborador
    # =====================================================
    def remover_usuario(self, chamador: Identidade, user_id: str) -> dict:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        exigir_role(contexto, {AppRole.ADMINISTRADOR}, "Apenas administradores podem remover usuários")

        if user_id == chamador.id:
            raise ValidationError("Você não pode remover a si mesmo")

        role_alvo = self.tenant_repo.buscar_role(user_id)
        if role_alvo and role_alvo.role == AppRole.ADMINISTRADOR:
            raise AuthorizationError("Não é permitido remover um administrador")

        perfil_alvo = self.tenant_repo.buscar_perfil(user_id)
        if perfil_alvo is None:
            raise NotFoundError("Usuário não encontrado")
        if perfil_alvo.company_id != contexto.company_id:
            raise AuthorizationError("Sem permissão para remover usuários de outra empresa")

        logger.info(f"🗑️ Removendo usuário {user_id} (solicitado por {chamador.id})")

        try:
            self.tenant_repo.remover_role(user_id)
            # Soft delete: vendas e propostas históricas continuam apontando para o perfil
            self.tenant_repo.definir_perfil_ativo(user_id, False)
            self.identity_repo.remover_identidade(user_id)
        except Exception as e:
            logger.error(f"❌ Erro ao remover usuário {user_id}: {e}")
            self._restaurar(user_id, role_alvo, perfil_alvo)
            raise UnexpectedError(f"Erro ao remover usuário: {e}")

        self.audit_repo.registrar_auditoria(AuditEntry(
            user_id=chamador.id,
            company_id=contexto.company_id,
            action="remover_usuario",
            resource="usuarios",
            resource_id=user_id,
            old_data={
                "email": perfil_alvo.email,
                "role": role_alvo.role.value if role_alvo else None,
                "is_active": perfil_alvo.is_active,
            },
            new_data={"is_active": False},
        ))
        logger.info(f"✅ Usuário {user_id} removido")
        return {"success": True, "message": "Usuário removido com sucesso"}

    def _restaurar(self, user_id: str, role: Optional[RoleAssignment], perfil: Profile) -> None:
        try:
            if role:
                self.tenant_repo.upsert_role(role)
            logger.info(f"↩️ Rollback: role de {user_id} restaurada")
        except Exception as e:
            logger.error(f"❌ Falha ao restaurar role de {user_id}: {e}")

        try:
            self.tenant_repo.definir_perfil_ativo(user_id, perfil.is_active)
            logger.info(f"↩️ Rollback: perfil de {user_id} restaurado")
        except Exception as e:
            logger.error(f"❌ Falha ao restaurar perfil de {user_id}; conta pode ter ficado desativada: {e}")

    # =====================================================
    # 📋 Listar equipe
    # =====================================================
    def listar_equipe(self, chamador: Identidade) -> list[dict]:
        contexto = carregar_contexto(chamador, self.tenant_repo)
        exigir_role(contexto, ADMIN_ROLES, "Apenas administradores podem listar usuários")
        company_id = exigir_empresa(contexto)

        equipe = []
        for perfil in self.tenant_repo.listar_perfis(company_id):
            role = self.tenant_repo.buscar_role(perfil.user_id)
            equipe.append({
                "user_id": perfil.user_id,
                "email": perfil.email,
                "full_name": perfil.full_name,
                "phone": perfil.phone,
                "is_active": perfil.is_active,
                "role": role.role.value if role else None,
            })
        return equipe
