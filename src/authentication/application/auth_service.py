# authentication/application/auth_service.py

from authentication.domain.entities import Identidade
from authentication.domain.repository_interface import IdentityRepositoryInterface
from authentication.infrastructure.token_service import gerar_token
from authentication.utils.password_utils import gerar_hash_senha, validar_senha, verificar_senha
from utils.errors import AuthenticationError
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("authentication")


class AuthService:
    def __init__(self, repo: IdentityRepositoryInterface):
        self.repo = repo

    def login(self, email: str, senha: str) -> dict:
        identidade = self.repo.buscar_por_email(email)
        if not identidade or not verificar_senha(senha, identidade.senha_hash):
            logger.warning(f"⚠️ Falha de login para {email}")
            raise AuthenticationError("Email ou senha incorretos")

        return {
            "access_token": gerar_token(identidade.id, identidade.email),
            "token_type": "bearer",
            "usuario": {
                "id": identidade.id,
                "email": identidade.email,
                "full_name": identidade.full_name,
            },
        }

    def cadastrar(self, email: str, senha: str, full_name: str | None) -> dict:
        """Cadastro aberto. Empresa, perfil e role são criados depois, no primeiro acesso."""
        validar_senha(senha)
        identidade = self.repo.criar_identidade(
            email=email,
            senha_hash=gerar_hash_senha(senha),
            full_name=full_name,
            email_confirmado=True,
        )
        logger.info(f"👤 Conta criada: {identidade.id} ({identidade.email})")
        return {
            "access_token": gerar_token(identidade.id, identidade.email),
            "token_type": "bearer",
            "usuario": {"id": identidade.id, "email": identidade.email, "full_name": identidade.full_name},
        }

    def alterar_senha(self, identidade: Identidade, senha_atual: str, nova_senha: str) -> None:
        if not verificar_senha(senha_atual, identidade.senha_hash):
            raise AuthenticationError("Senha atual incorreta")
        validar_senha(nova_senha)
        self.repo.atualizar_senha(identidade.id, gerar_hash_senha(nova_senha))
        logger.info(f"🔐 Senha alterada para o usuário {identidade.id}")
