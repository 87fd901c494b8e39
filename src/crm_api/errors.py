# crm_api/errors.py

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from utils.errors import AppError
from utils.json_sanitize import clean_for_json
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("crm_api")


def _erro(status_code: int, mensagem: str, details=None) -> JSONResponse:
    corpo = {"success": False, "error": mensagem}
    if details is not None:
        corpo["details"] = clean_for_json(details)
    return JSONResponse(status_code=status_code, content=corpo)


def _mensagem_validacao(exc: RequestValidationError) -> str:
    partes = []
    for erro in exc.errors():
        campo = ".".join(str(p) for p in erro.get("loc", []) if p != "body")
        partes.append(f"{campo}: {erro.get('msg')}" if campo else erro.get("msg", ""))
    return "; ".join(partes) or "Dados inválidos"


def registrar_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        else:
            logger.warning(f"⚠️ {request.method} {request.url.path} → {exc.status_code}: {exc.message}")
        return _erro(exc.status_code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        mensagem = _mensagem_validacao(exc)
        logger.warning(f"⚠️ Validação falhou em {request.url.path}: {mensagem}")
        return _erro(400, mensagem)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return _erro(exc.status_code, str(exc.detail))

    # 🔹 Registrado antes do CORSMiddleware (main.py): respostas 500 também levam os cabeçalhos CORS
    app.middleware("http")(capturar_erros_inesperados)


async def capturar_erros_inesperados(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception(f"❌ Erro inesperado em {request.method} {request.url.path}: {exc}")
        return _erro(500, "Erro interno do servidor")
