# -*- coding: utf-8 -*-
"""
Armazenamento local chave/valor (equivalente ao localStorage do navegador).

Cada chave vira um arquivo <pasta>/<chave>.json contendo o valor em texto.
"""
import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional

from src.config import Config

logger = logging.getLogger(__name__)

CHAVE_TRANSACOES = 'church-transactions'
CHAVE_ANEXOS = 'church-pdf-attachments'
CHAVE_MODO_ESCURO = 'church-dark-mode'


class ArmazenamentoLocal:

    def __init__(self, pasta=None):
        self.pasta = Path(pasta or Config.LOCAL_STORAGE_DIR)
        self.pasta.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    def _caminho(self, chave: str) -> Path:
        return self.pasta / f"{chave}.json"

    def get_item(self, chave: str) -> Optional[str]:
        caminho = self._caminho(chave)
        if not caminho.exists():
            return None
        return caminho.read_text(encoding="utf-8")

    def set_item(self, chave: str, valor: str) -> None:
        caminho = self._caminho(chave)
        tmp = caminho.with_suffix(".json.tmp")
        with self._lock:
            tmp.write_text(valor, encoding="utf-8")
            tmp.replace(caminho)

    def remove_item(self, chave: str) -> None:
        with self._lock:
            self._caminho(chave).unlink(missing_ok=True)

    def ler_json(self, chave: str, padrao: Any = None) -> Any:
        """Lê e decodifica o valor; conteúdo corrompido devolve o padrão."""
        texto = self.get_item(chave)
        if texto is None:
            return padrao
        try:
            return json.loads(texto)
        except ValueError:
            logger.warning("Conteúdo inválido na chave %s; usando valor padrão", chave)
            return padrao

    def gravar_json(self, chave: str, valor: Any) -> None:
        self.set_item(chave, json.dumps(valor, ensure_ascii=False))

    def atualizar_json(self, chave: str, funcao: Callable[[Any], Any], padrao: Any = None) -> Any:
        """
        Lê, transforma e grava o valor da chave sem que outra escrita aconteça no meio.

        Se `funcao` levantar uma exceção nada é gravado. Retorna o novo valor.
        """
        with self._lock:
            novo = funcao(self.ler_json(chave, padrao))
            self.gravar_json(chave, novo)
            return novo


armazenamento = None


def get_armazenamento():
    global armazenamento
    if armazenamento is None:
        armazenamento = ArmazenamentoLocal()
    return armazenamento
