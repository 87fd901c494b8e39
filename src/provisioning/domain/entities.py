# provisioning/domain/entities.py

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from authentication.domain.entities import AppRole


class CompanyStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CANCELED = "canceled"


class Plano(str, Enum):
    BASICO = "basico"
    PROFISSIONAL = "profissional"
    ENTERPRISE = "enterprise"


MAX_USERS_PADRAO = 2


@dataclass
class Company:
    id: Optional[str]
    name: str
    cnpj: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    responsavel: Optional[str] = None
    status: CompanyStatus = CompanyStatus.ACTIVE
    plano: Plano = Plano.BASICO
    max_users: int = MAX_USERS_PADRAO
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Profile:
    user_id: str
    email: str
    full_name: str
    company_id: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    id: Optional[str] = None


@dataclass
class RoleAssignment:
    user_id: str
    role: AppRole
    company_id: Optional[str] = None
