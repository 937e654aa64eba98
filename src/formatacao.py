# -*- coding: utf-8 -*-
"""
Formatação de valores em reais e de datas no padrão brasileiro.
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from src.agregacao import valor_numerico
from src.categorias import ENTRADA


def formatar_moeda(valor):
    """Decimal('1234.5') -> 'R$ 1.234,50'."""
    numero = valor if isinstance(valor, Decimal) else Decimal(str(valor))
    numero = numero.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sinal = "-" if numero < 0 else ""
    texto = f"{abs(numero):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"{sinal}R$ {texto}"


def formatar_valor_transacao(transacao):
    """'+ R$ 100,00' para entradas, '- R$ 40,00' para saídas."""
    sinal = "+" if transacao.tipo == ENTRADA else "-"
    return f"{sinal} {formatar_moeda(valor_numerico(transacao.valor))}"


def formatar_data_br(value):
    if not value:
        return ""
    try:
        if isinstance(value, str):
            value = date.fromisoformat(value)
        return value.strftime('%d/%m/%Y')
    except (ValueError, TypeError, AttributeError):
        return value
