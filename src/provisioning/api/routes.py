# provisioning/api/routes.py

from fastapi import APIRouter, Depends

from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import AppRole, Identidade
from authentication.domain.repository_interface import IdentityRepositoryInterface
from authentication.utils.dependencies import get_current_user
from crm_api.dependencies import (
    get_audit_repository,
    get_identity_repository,
    get_tenant_repository,
)
from provisioning.api.schemas import AddUserRequest, CreateCompanyRequest, RemoveUserRequest
from provisioning.application.company_creation_service import (
    CompanyCreationService,
    DadosNovaEmpresa,
)
from provisioning.application.self_service_provisioner import SelfServiceProvisioner
from provisioning.application.user_management_service import UserManagementService
from provisioning.domain.repository_interface import TenantRepositoryInterface

router = APIRouter(tags=["Provisionamento"])


def _user_service(
    tenant_repo: TenantRepositoryInterface = Depends(get_tenant_repository),
    identity_repo: IdentityRepositoryInterface = Depends(get_identity_repository),
    audit_repo: AuditRepositoryInterface = Depends(get_audit_repository),
) -> UserManagementService:
    return UserManagementService(tenant_repo, identity_repo, audit_repo)


def _company_service(
    tenant_repo: TenantRepositoryInterface = Depends(get_tenant_repository),
    identity_repo: IdentityRepositoryInterface = Depends(get_identity_repository),
    audit_repo: AuditRepositoryInterface = Depends(get_audit_repository),
) -> CompanyCreationService:
    return CompanyCreationService(tenant_repo, identity_repo, audit_repo)


@router.post("/setup-new-user", summary="Provisionar empresa, perfil e role no primeiro acesso")
def setup_new_user(
    user: Identidade = Depends(get_current_user),
    tenant_repo: TenantRepositoryInterface = Depends(get_tenant_repository),
):
    return SelfServiceProvisioner(tenant_repo).provisionar(user)


@router.post("/add-user", summary="Adicionar colaborador à empresa do administrador")
def add_user(
    body: AddUserRequest,
    user: Identidade = Depends(get_current_user),
    service: UserManagementService = Depends(_user_service),
):
    return service.adicionar_usuario(
        chamador=user,
        email=body.email,
        senha=body.password,
        full_name=body.full_name,
        role=AppRole(body.role),
        phone=body.phone,
    )


@router.post("/remove-user", summary="Remover colaborador (soft delete do perfil)")
def remove_user(
    body: RemoveUserRequest,
    user: Identidade = Depends(get_current_user),
    service: UserManagementService = Depends(_user_service),
):
    return service.remover_usuario(user, str(body.user_id))


@router.get("/users", summary="Listar usuários da empresa")
def list_users(
    user: Identidade = Depends(get_current_user),
    service: UserManagementService = Depends(_user_service),
):
    return {"success": True, "data": service.listar_equipe(user)}


@router.post("/create-company", summary="Criar empresa e administrador (Super Admin)")
def create_company(
    body: CreateCompanyRequest,
    user: Identidade = Depends(get_current_user),
    service: CompanyCreationService = Depends(_company_service),
):
    return service.criar_empresa(user, DadosNovaEmpresa(**body.model_dump()))
