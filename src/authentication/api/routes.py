# authentication/api/routes.py

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from authentication.application.auth_service import AuthService
from authentication.domain.entities import Identidade
from authentication.domain.repository_interface import IdentityRepositoryInterface
from authentication.utils.dependencies import get_current_user
from crm_api.dependencies import get_identity_repository, get_tenant_repository
from provisioning.application.authorization import carregar_contexto
from provisioning.domain.repository_interface import TenantRepositoryInterface

router = APIRouter(prefix="/auth", tags=["Authentication"])


# --------
# Models
# --------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = Field(None, max_length=100)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


# --------
# Endpoints
# --------
@router.post("/signup", summary="Criar conta (empresa é provisionada no primeiro acesso)")
def signup(request: SignupRequest, repo: IdentityRepositoryInterface = Depends(get_identity_repository)):
    return AuthService(repo).cadastrar(request.email, request.password, request.full_name)


@router.post("/login", summary="Realizar login e obter token JWT")
def login(request: LoginRequest, repo: IdentityRepositoryInterface = Depends(get_identity_repository)):
    return AuthService(repo).login(request.email, request.password)


@router.get("/me", summary="Obter informações do usuário autenticado")
def me(
    user: Identidade = Depends(get_current_user),
    tenant_repo: TenantRepositoryInterface = Depends(get_tenant_repository),
):
    contexto = carregar_contexto(user, tenant_repo)
    perfil = contexto.perfil
    return {
        "success": True,
        "data": {
            "id": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "role": contexto.role.value if contexto.role else None,
            "company_id": contexto.company_id,
            "is_active": perfil.is_active if perfil else None,
            "is_super_admin": contexto.is_super_admin,
        },
    }


@router.put("/password", summary="Alterar a própria senha")
def change_password(
    request: ChangePasswordRequest,
    user: Identidade = Depends(get_current_user),
    repo: IdentityRepositoryInterface = Depends(get_identity_repository),
):
    AuthService(repo).alterar_senha(user, request.current_password, request.new_password)
    return {"success": True, "message": "Senha alterada com sucesso"}
