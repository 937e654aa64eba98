# -*- coding: utf-8 -*-
"""
Modelo SQLAlchemy para a entidade Transação (entradas e saídas da tesouraria).
"""
from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Text, func
from src.database import Base


class Transacao(Base):
    __tablename__ = 'transacoes'

    id = Column(Integer, primary_key=True, index=True)
    tipo = Column(String(20), nullable=False)  # 'entrada' ou 'saida'
    # Qualquer texto é aceito aqui; o conjunto fechado vale só no formulário
    categoria = Column(String(50), nullable=False)
    valor = Column(Numeric(12, 2), nullable=False)
    descricao = Column(Text, nullable=False)
    data = Column(Date, nullable=False, index=True)
    responsavel = Column(String(120), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("usuarios.id"), nullable=True)
