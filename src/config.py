# -*- coding: utf-8 -*-
"""
Configuração da aplicação lida de variáveis de ambiente (e do arquivo .env).
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _int_env(nome, padrao):
    valor = os.environ.get(nome)
    if not valor:
        return padrao
    try:
        return int(valor)
    except ValueError:
        return padrao


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = _int_env('ACCESS_TOKEN_EXPIRE_MINUTES', 60 * 8)  # 8 horas

    DATABASE_URL = os.environ.get('DATABASE_URL', 'sqlite:///./database/tesouraria.db')
    LOCAL_STORAGE_DIR = os.environ.get('LOCAL_STORAGE_DIR', './database/local_storage')

    ENVIRONMENT = os.environ.get('ENVIRONMENT', 'development')
    FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:5173')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE') or None

    # Limites dos comprovantes em PDF guardados no armazenamento local
    MAX_PDF_BYTES = _int_env('MAX_PDF_BYTES', 5 * 1024 * 1024)
    MAX_ANEXOS_BYTES = _int_env('MAX_ANEXOS_BYTES', 20 * 1024 * 1024)
