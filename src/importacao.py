# -*- coding: utf-8 -*-
"""
Importação em lote de registros no formato externo
(type/category/amount/description/date/responsible).

O lote é tudo-ou-nada: o primeiro item com problema interrompe a importação,
nada é gravado e o relatório informa qual item falhou.
"""
import logging
from typing import Any, Optional, Sequence

from pydantic import BaseModel

from src.categorias import ENTRADA, SAIDA
from src.erros import ErroArmazenamento, ErroValidacao
from src.schemas.transacao import FalhaImportacao, RelatorioImportacao, TransacaoCreate
from src.validacao import converter_data, converter_valor

logger = logging.getLogger(__name__)

CAMPOS_TEXTO = (
    ("category", "categoria"),
    ("description", "descricao"),
    ("responsible", "responsavel"),
)


def converter_registro(registro: Any) -> TransacaoCreate:
    """Converte um registro externo para o formato interno de transação."""
    dados = registro.model_dump() if isinstance(registro, BaseModel) else dict(registro)

    tipo = ENTRADA if dados.get("type") == ENTRADA else SAIDA

    textos = {}
    for externo, interno in CAMPOS_TEXTO:
        valor = dados.get(externo)
        if valor is None:
            raise ErroValidacao(f"Campo obrigatório ausente: {externo}", [externo])
        textos[interno] = str(valor)

    if dados.get("amount") is None:
        raise ErroValidacao("Campo obrigatório ausente: amount", ["amount"])

    return TransacaoCreate(
        tipo=tipo,
        valor=converter_valor(dados["amount"]),
        data=converter_data(dados.get("date")),
        **textos,
    )


def importar_transacoes(repositorio, registros: Sequence[Any], user_id: Optional[int] = None) -> RelatorioImportacao:
    total = len(registros)

    itens = []
    for indice, registro in enumerate(registros):
        try:
            itens.append(converter_registro(registro))
        except (ErroValidacao, TypeError, ValueError) as e:
            mensagem = getattr(e, "mensagem", None) or str(e)
            logger.error("Erro na importação: item %d inválido (%s)", indice, mensagem)
            return RelatorioImportacao(
                total=total, importados=0,
                falhas=[FalhaImportacao(indice=indice, erro=mensagem)],
            )

    try:
        criadas = repositorio.criar_em_lote(itens, user_id=user_id)
    except ErroArmazenamento as e:
        return RelatorioImportacao(
            total=total, importados=0,
            falhas=[FalhaImportacao(indice=e.indice or 0, erro=e.mensagem)],
        )

    logger.info("%d transações importadas", len(criadas))
    return RelatorioImportacao(total=total, importados=len(criadas))
