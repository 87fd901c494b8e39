# registry/domain/cpf.py

import re
from typing import Optional


def somente_digitos(valor: Optional[str]) -> str:
    return re.sub(r"\D", "", valor or "")


def _digito_verificador(digitos: str, peso_inicial: int) -> int:
    soma = sum(int(d) * peso for d, peso in zip(digitos, range(peso_inicial, 1, -1)))
    resto = (soma * 10) % 11
    return 0 if resto == 10 else resto


def cpf_valido(cpf: Optional[str]) -> bool:
    """Aceita CPF formatado ou não; rejeita sequências repetidas (000..., 111...)."""
    digitos = somente_digitos(cpf)
    if len(digitos) != 11 or len(set(digitos)) == 1:
        return False
    if _digito_verificador(digitos[:9], 10) != int(digitos[9]):
        return False
    return _digito_verificador(digitos[:10], 11) == int(digitos[10])
