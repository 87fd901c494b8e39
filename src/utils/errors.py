# utils/errors.py

from typing import Any, Optional


class AppError(Exception):
    """Erro de domínio convertido em resposta JSON `{"success": false, "error": ...}`."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class AuthenticationError(AppError):
    status_code = 401

    def __init__(self, message: str = "Não autenticado", **kwargs):
        super().__init__(message, **kwargs)


class AuthorizationError(AppError):
    status_code = 403


class ValidationError(AppError):
    status_code = 400


class BusinessRuleError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class UpstreamError(AppError):
    status_code = 422


class UnexpectedError(AppError):
    status_code = 500


class IdentidadeJaExisteError(ValidationError):
    def __init__(self, email: str):
        super().__init__(f"Email já cadastrado: {email}")
        self.email = email


class CpfJaCadastradoError(BusinessRuleError):
    def __init__(self, cpf: str):
        super().__init__("CPF já cadastrado nesta empresa")
        self.cpf = cpf
