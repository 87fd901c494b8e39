# authentication/infrastructure/token_service.py
import jwt
from datetime import datetime, timedelta

from crm_api.config import get_settings
from utils.errors import AuthenticationError


def gerar_token(usuario_id: str, email: str) -> str:
    settings = get_settings()
    payload = {
        "sub": usuario_id,
        "email": email,
        "exp": datetime.utcnow() + timedelta(minutes=settings.JWT_EXP_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verificar_token(token: str) -> dict:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expirado")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Token inválido")

    if not payload.get("sub"):
        raise AuthenticationError("Token inválido")
    return payload
