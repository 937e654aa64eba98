# -*- coding: utf-8 -*-
"""
Filtro por tipo e busca textual do histórico de transações.
"""
from typing import Any, Iterable, List

from src.agregacao import campo
from src.categorias import FILTROS, TODOS

CAMPOS_BUSCA = ("descricao", "categoria", "responsavel")


def _texto(valor: Any) -> str:
    return "" if valor is None else str(valor).lower()


def corresponde_busca(transacao: Any, busca: str) -> bool:
    """Busca por substring, sem diferenciar maiúsculas de minúsculas."""
    termo = (busca or "").lower()
    if not termo:
        return True
    return any(termo in _texto(campo(transacao, nome)) for nome in CAMPOS_BUSCA)


def filtrar_transacoes(transacoes: Iterable[Any], tipo: str = TODOS, busca: str = "") -> List[Any]:
    """
    Retorna as transações do tipo pedido ('todos', 'entrada' ou 'saida') que
    casam com a busca, mantendo a ordem de entrada.
    """
    if tipo not in FILTROS:
        raise ValueError(f"Filtro de tipo inválido: {tipo!r}")
    return [
        t for t in transacoes
        if (tipo == TODOS or campo(t, "tipo") == tipo) and corresponde_busca(t, busca)
    ]
