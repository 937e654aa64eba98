# -*- coding: utf-8 -*-
"""
Cálculo de totais e resumo por categoria sobre uma lista de transações.

As funções aceitam objetos ORM, schemas pydantic ou dicionários (como os
registros guardados no cache local). Não há cache: os valores são recalculados
a cada chamada.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from src.categorias import ENTRADA

ZERO = Decimal("0")
TOP_CATEGORIAS = 8


@dataclass(frozen=True)
class Totais:
    entradas: Decimal = ZERO
    saidas: Decimal = ZERO
    saldo: Decimal = ZERO


@dataclass(frozen=True)
class ResumoCategoria:
    total: Decimal = ZERO
    count: int = 0


def campo(transacao: Any, nome: str, padrao: Any = None) -> Any:
    """Lê um campo de um dicionário ou de um objeto com atributos."""
    if isinstance(transacao, Mapping):
        return transacao.get(nome, padrao)
    return getattr(transacao, nome, padrao)


def valor_numerico(valor: Any) -> Decimal:
    """
    Converte o valor de uma transação para Decimal.

    Valores ausentes, não numéricos, infinitos ou negativos contam como zero.
    """
    if valor is None or isinstance(valor, bool):
        return ZERO
    try:
        numero = valor if isinstance(valor, Decimal) else Decimal(str(valor).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    if not numero.is_finite() or numero < 0:
        return ZERO
    return numero


def calcular_totais(transacoes: Iterable[Any]) -> Totais:
    entradas = ZERO
    saidas = ZERO
    for t in transacoes:
        valor = valor_numerico(campo(t, "valor"))
        if campo(t, "tipo") == ENTRADA:
            entradas += valor
        else:
            saidas += valor
    return Totais(entradas=entradas, saidas=saidas, saldo=entradas - saidas)


def resumo_por_categoria(transacoes: Iterable[Any]) -> Dict[str, ResumoCategoria]:
    acumulado: Dict[str, ResumoCategoria] = {}
    for t in transacoes:
        chave = campo(t, "categoria") or ""
        atual = acumulado.get(chave, ResumoCategoria())
        acumulado[chave] = ResumoCategoria(
            total=atual.total + valor_numerico(campo(t, "valor")),
            count=atual.count + 1,
        )
    return acumulado


def top_categorias(
    resumo: Dict[str, ResumoCategoria], limite: int = TOP_CATEGORIAS
) -> List[Tuple[str, ResumoCategoria]]:
    ordenado = sorted(resumo.items(), key=lambda item: item[1].total, reverse=True)
    return ordenado[:limite]
