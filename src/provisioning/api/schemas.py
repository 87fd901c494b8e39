# provisioning/api/schemas.py

from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from provisioning.domain.entities import MAX_USERS_PADRAO, Plano


class AddUserRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, description="Senha (mínimo 6 caracteres)")
    full_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = None
    role: Literal["vendedor", "administrador"] = "vendedor"


class RemoveUserRequest(BaseModel):
    user_id: UUID


class CreateCompanyRequest(BaseModel):
    company_name: str = Field(..., min_length=2, max_length=100)
    cnpj: str = Field(..., min_length=14, max_length=18)
    company_email: Optional[EmailStr] = None
    company_phone: Optional[str] = None
    responsavel: Optional[str] = Field(None, max_length=100)
    plano: Plano = Plano.BASICO
    max_users: int = Field(MAX_USERS_PADRAO, ge=1, le=100)
    admin_email: EmailStr
    admin_password: str = Field(..., min_length=8, description="Senha do admin (mínimo 8 caracteres)")
    admin_name: str = Field(..., min_length=2, max_length=100)
    confirmar_migracao_admin: bool = False
