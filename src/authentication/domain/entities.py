#authentication/domain/entities.py

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class AppRole(str, Enum):
    VENDEDOR = "vendedor"
    ADMINISTRADOR = "administrador"
    RAIZ = "raiz"
    ADMIN_GLOBAL = "admin_global"
    ADMIN_EMPRESA = "admin_empresa"
    GERENTE = "gerente"
    AUDITOR = "auditor"
    COMPLIANCE = "compliance"
    FINANCEIRO = "financeiro"
    OPERACOES = "operacoes"


# 🔹 Super admins da plataforma (sem empresa fixa)
SUPER_ADMIN_ROLES = frozenset({AppRole.RAIZ, AppRole.ADMIN_GLOBAL})

# 🔹 Podem cadastrar colaboradores na própria empresa
ADMIN_ROLES = frozenset({
    AppRole.ADMINISTRADOR,
    AppRole.ADMIN_EMPRESA,
    AppRole.RAIZ,
    AppRole.ADMIN_GLOBAL,
})

# 🔹 Podem enviar e sincronizar propostas com bancos
PROPOSAL_ROLES = frozenset({
    AppRole.VENDEDOR,
    AppRole.ADMINISTRADOR,
    AppRole.RAIZ,
    AppRole.ADMIN_GLOBAL,
    AppRole.ADMIN_EMPRESA,
    AppRole.GERENTE,
})

# 🔹 Enxergam as vendas de toda a empresa no dashboard
GESTAO_ROLES = ADMIN_ROLES | {AppRole.GERENTE}


@dataclass
class Identidade:
    id: str
    email: str
    senha_hash: str
    full_name: Optional[str] = None
    email_confirmado: bool = True
    criado_em: datetime = field(default_factory=datetime.utcnow)

    @property
    def nome_exibicao(self) -> str:
        if self.full_name:
            return self.full_name
        if self.email and "@" in self.email:
            return self.email.split("@")[0]
        return "Usuário"
