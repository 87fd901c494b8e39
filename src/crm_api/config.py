# crm_api/config.py

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Banco de dados
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_DATABASE: str = "crm_consignado"
    DB_USER: str = "postgres"
    DB_PASS: str = "postgres"

    # JWT
    JWT_SECRET_KEY: str = "changeme"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXP_MINUTES: int = 120

    # Integração Facta
    FACTA_API_KEY: str | None = None
    FACTA_BASE_URL: str = "https://webapi.facta.com.br"
    FACTA_TIMEOUT: float = 30.0

    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
