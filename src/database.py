# -*- coding: utf-8 -*-
"""
Configuração do banco de dados SQLAlchemy para a aplicação FastAPI.
"""

from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from src.config import Config

DATABASE_URL = Config.DATABASE_URL

# Se for PostgreSQL no Render, ajusta o prefixo se necessário
if DATABASE_URL and DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# Configuração de argumentos de conexão
connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}
    # Garante que a pasta do arquivo SQLite exista
    caminho = DATABASE_URL.split("///", 1)[-1]
    if caminho and caminho != ":memory:":
        Path(caminho).parent.mkdir(parents=True, exist_ok=True)

# pool_pre_ping verifica a conexão antes de usar; pool_recycle recicla a cada hora
engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,
    pool_recycle=3600
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Função para obter uma sessão do banco de dados (usada com Depends)
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Fábrica de sessões para quem precisa abrir e fechar a sessão por conta própria
# (ex.: WebSocket, que não pode segurar uma conexão durante toda a inscrição)
def get_session_factory():
    return SessionLocal
