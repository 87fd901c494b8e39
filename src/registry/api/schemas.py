# registry/api/schemas.py

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

# M = masculino, F = feminino, O = outro
Genero = Literal["M", "F", "O"]


class ClienteRequest(BaseModel):
    full_name: str = Field(..., min_length=3, max_length=200)
    cpf: str = Field(..., min_length=11, max_length=14, description="CPF com ou sem máscara")
    birth_date: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    gender: Optional[Genero] = None
    address_city: Optional[str] = Field(None, max_length=100)
    address_state: Optional[str] = Field(None, min_length=2, max_length=2, description="UF")
    internal_notes: Optional[str] = Field(None, max_length=1000)


class AtualizarClienteRequest(BaseModel):
    """Atualização parcial: só os campos enviados são alterados."""
    full_name: Optional[str] = Field(None, min_length=3, max_length=200)
    cpf: Optional[str] = Field(None, min_length=11, max_length=14)
    birth_date: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    gender: Optional[Genero] = None
    address_city: Optional[str] = Field(None, max_length=100)
    address_state: Optional[str] = Field(None, min_length=2, max_length=2)
    internal_notes: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None


class BancoRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    code: Optional[str] = Field(None, max_length=20)
    possui_api: bool = False
    base_url: Optional[str] = Field(None, max_length=255)
    is_active: bool = True
    priority: int = Field(0, ge=0, le=100)


class AtualizarBancoRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    code: Optional[str] = Field(None, max_length=20)
    possui_api: Optional[bool] = None
    base_url: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None
    priority: Optional[int] = Field(None, ge=0, le=100)
