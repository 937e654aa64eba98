# -*- coding: utf-8 -*-
"""
Validação do formulário de nova transação.

Nada chega ao repositório sem passar por aqui; em caso de erro é levantado
ErroValidacao com a mensagem que deve ser mostrada ao usuário.
"""
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from src.categorias import TIPOS, categoria_valida
from src.erros import ErroValidacao
from src.schemas.transacao import TransacaoCreate

MENSAGEM_CAMPOS_OBRIGATORIOS = "Por favor, preencha todos os campos obrigatórios."
MENSAGEM_VALOR_INVALIDO = "Informe um valor numérico maior ou igual a zero."
MENSAGEM_CATEGORIA_INVALIDA = "Categoria inválida para o tipo selecionado."
MENSAGEM_TIPO_INVALIDO = "Tipo de transação inválido."
MENSAGEM_DATA_INVALIDA = "Data inválida."

CAMPOS_OBRIGATORIOS = ("categoria", "valor", "descricao", "responsavel")


def _vazio(valor: Any) -> bool:
    return valor is None or (isinstance(valor, str) and not valor.strip())


def converter_valor(valor: Any) -> Decimal:
    """Aceita '10.50', '10,50', 10.5 ou Decimal. Levanta ErroValidacao se inválido."""
    if isinstance(valor, bool):
        raise ErroValidacao(MENSAGEM_VALOR_INVALIDO, ["valor"])
    texto = str(valor).strip()
    if "," in texto and "." not in texto:
        texto = texto.replace(",", ".")
    try:
        numero = Decimal(texto)
    except (InvalidOperation, ValueError):
        raise ErroValidacao(MENSAGEM_VALOR_INVALIDO, ["valor"])
    if not numero.is_finite() or numero < 0:
        raise ErroValidacao(MENSAGEM_VALOR_INVALIDO, ["valor"])
    return numero


def converter_data(valor: Any, hoje: Optional[date] = None) -> date:
    if _vazio(valor):
        return hoje or date.today()
    if isinstance(valor, date):
        return valor
    try:
        # aceita "AAAA-MM-DD" ou um datetime ISO ("AAAA-MM-DDTHH:MM:SS")
        return date.fromisoformat(str(valor).strip().split("T", 1)[0])
    except ValueError:
        raise ErroValidacao(MENSAGEM_DATA_INVALIDA, ["data"])


def validar_formulario(formulario: Any, hoje: Optional[date] = None) -> TransacaoCreate:
    if isinstance(formulario, BaseModel):
        dados = formulario.model_dump()
    elif isinstance(formulario, Mapping):
        dados = dict(formulario)
    else:
        raise TypeError("formulario deve ser um mapeamento ou um schema pydantic")

    tipo = dados.get("tipo") or "entrada"
    if tipo not in TIPOS:
        raise ErroValidacao(MENSAGEM_TIPO_INVALIDO, ["tipo"])

    faltando = [nome for nome in CAMPOS_OBRIGATORIOS if _vazio(dados.get(nome))]
    if faltando:
        raise ErroValidacao(MENSAGEM_CAMPOS_OBRIGATORIOS, faltando)

    categoria = str(dados["categoria"]).strip()
    if not categoria_valida(tipo, categoria):
        raise ErroValidacao(MENSAGEM_CATEGORIA_INVALIDA, ["categoria"])

    return TransacaoCreate(
        tipo=tipo,
        categoria=categoria,
        valor=converter_valor(dados["valor"]),
        descricao=str(dados["descricao"]).strip(),
        data=converter_data(dados.get("data"), hoje),
        responsavel=str(dados["responsavel"]).strip(),
    )
