# crm_api/main.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from authentication.api.routes import router as auth_router
from crm_api import health
from crm_api.config import get_settings
from crm_api.errors import registrar_handlers
from dashboard.api.routes import router as dashboard_router
from proposals.api.routes import router as proposals_router
from provisioning.api.routes import router as provisioning_router
from registry.api.routes import router as registry_router

settings = get_settings()

app = FastAPI(
    title="CRM Consignado API",
    description="Provisionamento multi-empresa, gestão de usuários, cadastros, propostas e dashboard de vendas",
    version="1.0.0",
)

# Routers
app.include_router(health.router, prefix="/health")
app.include_router(auth_router)
app.include_router(provisioning_router)
app.include_router(registry_router)
app.include_router(proposals_router)
app.include_router(dashboard_router)

# Antes do CORS: o middleware de erros fica por dentro dele
registrar_handlers(app)

# 🔓 CORS: origens vindas do .env (padrão: todas)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
