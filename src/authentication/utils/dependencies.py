# authentication/utils/dependencies.py

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from authentication.domain.entities import Identidade
from authentication.domain.repository_interface import IdentityRepositoryInterface
from authentication.infrastructure.token_service import verificar_token
from crm_api.dependencies import get_identity_repository
from utils.errors import AuthenticationError

# auto_error=False: a ausência do header vira 401 no formato padrão da API
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    repo: IdentityRepositoryInterface = Depends(get_identity_repository),
) -> Identidade:
    """
    Valida o bearer token e carrega a identidade correspondente.
    A identidade é sempre relida do banco: nada do corpo da requisição é usado
    para decidir quem é o chamador.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    payload = verificar_token(credentials.credentials)
    identidade = repo.buscar_por_id(payload["sub"])
    if identidade is None:
        raise AuthenticationError()
    return identidade
