# proposals/infrastructure/facta_client.py

import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from utils.errors import UnexpectedError, UpstreamError
from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("facta")


@dataclass
class RespostaFacta:
    status_code: int
    conteudo: Any
    duration_ms: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def campo(self, nome: str):
        if isinstance(self.conteudo, dict):
            return self.conteudo.get(nome)
        return None

    @property
    def mensagem(self) -> Optional[str]:
        return self.campo("message") or self.campo("mensagem") or self.campo("error")


class FactaIndisponivelError(UpstreamError):
    """Falha de transporte (timeout, conexão recusada, DNS)."""


class FactaClient:
    """
    Cliente HTTP da API Facta. Uma chamada por operação, sem retry.
    `transport` permite injetar um httpx.MockTransport nos testes.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url_padrao: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url_padrao = base_url_padrao
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict:
        if not self.api_key:
            raise UnexpectedError("FACTA_API_KEY não configurada")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Basic {self.api_key}",
        }

    def _url(self, base_url: Optional[str], caminho: str) -> str:
        return f"{(base_url or self.base_url_padrao).rstrip('/')}{caminho}"

    async def _request(self, method: str, url: str, json=None) -> RespostaFacta:
        headers = self._headers()
        inicio = time.monotonic()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.request(method, url, headers=headers, json=json)
            except httpx.HTTPError as e:
                logger.error(f"❌ Falha de comunicação com a Facta ({method} {url}): {e}")
                raise FactaIndisponivelError(
                    f"Falha de comunicação com a Facta: {str(e) or e.__class__.__name__}"
                ) from e

        duracao = int((time.monotonic() - inicio) * 1000)

        content_type = response.headers.get("content-type", "").lower()
        if "application/json" in content_type:
            try:
                conteudo = response.json()
            except ValueError:
                conteudo = response.text
        else:
            conteudo = response.text

        logger.info(f"🌐 Facta {method} {url} → {response.status_code} ({duracao} ms)")
        return RespostaFacta(status_code=response.status_code, conteudo=conteudo, duration_ms=duracao)

    async def enviar_proposta(self, base_url: Optional[str], payload: dict) -> RespostaFacta:
        return await self._request("POST", self._url(base_url, "/v2/propostas"), json=payload)

    async def consultar_status(self, base_url: Optional[str], protocolo: str) -> RespostaFacta:
        return await self._request("GET", self._url(base_url, f"/v2/propostas/{protocolo}/status"))
