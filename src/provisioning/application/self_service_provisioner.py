# provisioning/application/self_service_provisioner.py

from authentication.domain.entities import AppRole, Identidade
from provisioning.domain.entities import Company, CompanyStatus, Plano, Profile, RoleAssignment
from provisioning.domain.repository_interface import TenantRepositoryInterface
from utils.errors import UnexpectedError
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("provisioning")

JA_PROVISIONADO = "already_provisioned"


class SelfServiceProvisioner:
    """
    Garante que toda identidade autenticada tenha empresa, perfil e role.
    Executado no primeiro acesso; chamadas repetidas não gravam nada.
    """

    def __init__(self, repo: TenantRepositoryInterface):
        self.repo = repo

    def provisionar(self, identidade: Identidade) -> dict:
        perfil = self.repo.buscar_perfil(identidade.id)
        role = self.repo.buscar_role(identidade.id)

        if perfil and perfil.company_id and role:
            return {"message": JA_PROVISIONADO}

        nome = identidade.nome_exibicao
        company_id = perfil.company_id if perfil else None
        empresa_criada = None
        perfil_criado = False

        try:
            if not company_id:
                empresa_criada = self.repo.criar_empresa(Company(
                    id=None,
                    name=f"Empresa de {nome}",
                    email=identidade.email,
                    status=CompanyStatus.ACTIVE,
                    plano=Plano.BASICO,
                ))
                company_id = empresa_criada.id
                logger.info(f"🏢 Empresa {company_id} criada para {identidade.id}")

            if perfil is None:
                perfil_criado = self.repo.criar_perfil(Profile(
                    user_id=identidade.id,
                    email=identidade.email,
                    full_name=nome,
                    company_id=company_id,
                ))
                if not perfil_criado:
                    # Outra requisição concorrente provisionou primeiro
                    logger.warning(f"⚠️ Provisionamento concorrente detectado para {identidade.id}")
                    if empresa_criada:
                        self.repo.remover_empresa(empresa_criada.id)
                    return {"message": JA_PROVISIONADO}
            elif not perfil.company_id:
                self.repo.vincular_empresa_perfil(identidade.id, company_id)

            if role is None:
                self.repo.inserir_role(RoleAssignment(
                    user_id=identidade.id,
                    role=AppRole.VENDEDOR,
                    company_id=company_id,
                ))
        except Exception as e:
            logger.error(f"❌ Erro no provisionamento de {identidade.id}: {e}")
            self._desfazer(identidade.id, empresa_criada, perfil_criado)
            raise UnexpectedError(f"Erro ao configurar conta: {e}")

        logger.info(f"✅ Usuário {identidade.id} provisionado na empresa {company_id}")
        return {"success": True, "company_id": company_id}

    def _desfazer(self, user_id: str, empresa_criada: Company | None, perfil_criado: bool) -> None:
        try:
            if perfil_criado:
                self.repo.remover_perfil(user_id)
            if empresa_criada:
                self.repo.remover_empresa(empresa_criada.id)
                logger.info(f"↩️ Rollback: empresa {empresa_criada.id} removida")
        except Exception as e:
            logger.error(f"❌ Falha no rollback do provisionamento de {user_id}: {e}")
