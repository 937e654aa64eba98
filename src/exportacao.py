# -*- coding: utf-8 -*-
"""
Backup em JSON das transações guardadas no cache local.

O cache (chave 'church-transactions') é atualizado a cada snapshot do
repositório e guarda os registros já no formato externo.
"""
import json
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from src.agregacao import campo
from src.armazenamento_local import CHAVE_TRANSACOES

logger = logging.getLogger(__name__)

# (externo, interno)
CAMPOS_EXTERNOS = (
    ("id", "id"),
    ("type", "tipo"),
    ("category", "categoria"),
    ("amount", "valor"),
    ("description", "descricao"),
    ("date", "data"),
    ("responsible", "responsavel"),
)


def _serializavel(valor: Any) -> Any:
    if isinstance(valor, Decimal):
        return float(valor)
    if isinstance(valor, date):
        return valor.isoformat()
    return valor


def para_registro_externo(transacao: Any) -> Dict[str, Any]:
    """
    Mapeia uma transação para {id, type, category, amount, description, date,
    responsible}. Entradas antigas do cache com nomes internos também são aceitas.
    """
    registro = {}
    for externo, interno in CAMPOS_EXTERNOS:
        valor = campo(transacao, externo)
        if valor is None:
            valor = campo(transacao, interno)
        registro[externo] = _serializavel(valor)
    return registro


def atualizar_cache_local(armazenamento):
    def ouvinte(snapshot):
        armazenamento.gravar_json(CHAVE_TRANSACOES, [para_registro_externo(t) for t in snapshot])
    return ouvinte


def registrar_cache_local(repositorio, armazenamento):
    """Mantém o cache local em dia com o repositório. Retorna o cancelamento."""
    return repositorio.inscrever(atualizar_cache_local(armazenamento))


def nome_arquivo_backup(hoje: Optional[date] = None) -> str:
    return f"tesouraria_backup_{(hoje or date.today()).isoformat()}.json"


def exportar_backup(armazenamento, hoje: Optional[date] = None) -> Tuple[str, str]:
    transacoes = armazenamento.ler_json(CHAVE_TRANSACOES, [])
    if not isinstance(transacoes, list):
        logger.warning("Cache local de transações não é uma lista; exportando vazio")
        transacoes = []

    dados = [para_registro_externo(t) for t in transacoes if isinstance(t, dict)]
    conteudo = json.dumps(dados, ensure_ascii=False, indent=2)
    return nome_arquivo_backup(hoje), conteudo
