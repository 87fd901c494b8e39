# authentication/utils/password_utils.py

import bcrypt

from utils.errors import ValidationError

SENHA_MINIMA = 6


def gerar_hash_senha(senha: str) -> str:
    return bcrypt.hashpw(senha.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verificar_senha(senha: str, senha_hash: str) -> bool:
    if not senha or not senha_hash:
        return False
    return bcrypt.checkpw(senha.encode("utf-8"), senha_hash.encode("utf-8"))


def validar_senha(senha: str, minimo: int = SENHA_MINIMA) -> None:
    if not senha or len(senha) < minimo:
        raise ValidationError(f"A senha deve ter no mínimo {minimo} caracteres")
