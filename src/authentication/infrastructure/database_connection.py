#authentication/infrastructure/database_connection.py

import os
import psycopg2
from dotenv import load_dotenv

from crm_api.config import get_settings
from utils.logging_factory import LoggerFactory

# 🟩 Carrega variáveis do .env global do projeto
dotenv_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..', '..', '.env'))
load_dotenv(dotenv_path)

logger = LoggerFactory.get_logger("database")


def conectar_banco():
    settings = get_settings()
    try:
        return psycopg2.connect(
            dbname=settings.DB_DATABASE,
            user=settings.DB_USER,
            password=settings.DB_PASS,
            host=settings.DB_HOST,
            port=settings.DB_PORT,
        )
    except psycopg2.Error as e:
        logger.error(f"❌ Erro ao conectar ao banco de dados: {e}")
        raise


def fechar_conexao(conn):
    if conn:
        conn.close()


def obter_conexao():
    """Dependência FastAPI: uma conexão por requisição, fechada ao final."""
    conn = conectar_banco()
    try:
        yield conn
    finally:
        fechar_conexao(conn)
