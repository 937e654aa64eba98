# -*- coding: utf-8 -*-
"""
Arquivo principal da aplicação FastAPI do Sistema de Tesouraria.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import Config
from src.database import engine, Base
from src.models import transacao, usuario  # registra as tabelas na Base
from src.armazenamento_local import get_armazenamento
from src.exportacao import registrar_cache_local
from src.repositorio import get_repositorio
from src.routes import (auth_fastapi, transacoes_fastapi, dashboard_fastapi,
                        categorias_fastapi, configuracoes_fastapi)

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=Config.LOG_FILE
)
logger = logging.getLogger(__name__)

# Cria as tabelas no banco de dados com tratamento de erros
try:
    Base.metadata.create_all(bind=engine)
    logger.info("Tabelas criadas com sucesso!")
except Exception:
    logger.exception("Erro ao criar tabelas")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Mantém o cache local (fonte do backup) em dia com o banco
    cancelar = registrar_cache_local(get_repositorio(), get_armazenamento())
    yield
    cancelar()


env = Config.ENVIRONMENT

app = FastAPI(
    title="API Sistema de Tesouraria",
    description="API da tesouraria da igreja: entradas, saídas, histórico, backup e comprovantes",
    version="1.0.0",
    docs_url="/docs" if env != "production" else None,
    redoc_url="/redoc" if env != "production" else None,
    openapi_url="/openapi.json" if env != "production" else None,
    lifespan=lifespan,
)

origins = [
    Config.FRONTEND_URL,
    "http://localhost:5173",
    "http://localhost",
    "http://127.0.0.1",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Montagem dos routers
app.include_router(auth_fastapi.router)
app.include_router(transacoes_fastapi.router, prefix="/api/v1/transacoes")
app.include_router(dashboard_fastapi.router, prefix="/api/v1/dashboard")
app.include_router(categorias_fastapi.router, prefix="/api/v1/categorias")
app.include_router(configuracoes_fastapi.router, prefix="/api/v1/configuracoes")


@app.get("/", tags=["Root"])
async def root():
    return {
        "mensagem": "API Sistema de Tesouraria",
        "documentacao": "/docs",
        "endpoints": [
            {"auth": "/api/v1/auth"},
            {"transacoes": "/api/v1/transacoes"},
            {"dashboard": "/api/v1/dashboard"},
            {"categorias": "/api/v1/categorias"},
            {"configuracoes": "/api/v1/configuracoes"},
        ]
    }
