# -*- coding: utf-8 -*-
"""
Estado da aplicação para a camada de apresentação.

O estado é imutável: cada ação passa por `reduzir` e gera um novo estado.
Usuário atual, aba ativa, cache de transações, filtros do histórico e o
formulário de nova transação ficam todos aqui.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

from src.agregacao import Totais, calcular_totais
from src.categorias import ENTRADA, FILTROS, TIPOS, TODOS, categorias_do_tipo
from src.filtros import filtrar_transacoes

ABAS = ("dashboard", "nova", "historico", "configuracoes")


@dataclass(frozen=True)
class EstadoFormulario:
    tipo: str = ENTRADA
    categoria: str = ""
    valor: str = ""
    descricao: str = ""
    data: str = ""
    responsavel: str = ""


@dataclass(frozen=True)
class EstadoApp:
    usuario: Optional[Any] = None
    transacoes: Tuple[Any, ...] = ()
    aba: str = "dashboard"
    carregando: bool = True
    filtro_tipo: str = TODOS
    busca: str = ""
    formulario: EstadoFormulario = field(default_factory=EstadoFormulario)


# --- Ações ---

@dataclass(frozen=True)
class UsuarioAlterado:
    usuario: Optional[Any]


@dataclass(frozen=True)
class SnapshotRecebido:
    transacoes: Tuple[Any, ...]


@dataclass(frozen=True)
class AbaSelecionada:
    aba: str


@dataclass(frozen=True)
class FiltroAlterado:
    tipo: str


@dataclass(frozen=True)
class BuscaAlterada:
    busca: str


@dataclass(frozen=True)
class TipoFormularioAlterado:
    tipo: str


@dataclass(frozen=True)
class CampoFormularioAlterado:
    campo: str
    valor: str


@dataclass(frozen=True)
class TransacaoRegistrada:
    hoje: str = ""


@dataclass(frozen=True)
class Desconectado:
    pass


CAMPOS_EDITAVEIS = ("categoria", "valor", "descricao", "data", "responsavel")


def reduzir(estado: EstadoApp, acao) -> EstadoApp:
    if isinstance(acao, UsuarioAlterado):
        if acao.usuario is None:
            return replace(estado, usuario=None, transacoes=(), carregando=False)
        return replace(estado, usuario=acao.usuario)

    if isinstance(acao, SnapshotRecebido):
        return replace(estado, transacoes=tuple(acao.transacoes), carregando=False)

    if isinstance(acao, AbaSelecionada):
        if acao.aba not in ABAS:
            raise ValueError(f"Aba desconhecida: {acao.aba!r}")
        return replace(estado, aba=acao.aba)

    if isinstance(acao, FiltroAlterado):
        if acao.tipo not in FILTROS:
            raise ValueError(f"Filtro de tipo inválido: {acao.tipo!r}")
        return replace(estado, filtro_tipo=acao.tipo)

    if isinstance(acao, BuscaAlterada):
        return replace(estado, busca=acao.busca)

    if isinstance(acao, TipoFormularioAlterado):
        if acao.tipo not in TIPOS:
            raise ValueError(f"Tipo de transação inválido: {acao.tipo!r}")
        # trocar o tipo limpa a categoria para não misturar tipo e categoria
        formulario = replace(estado.formulario, tipo=acao.tipo, categoria="")
        return replace(estado, formulario=formulario)

    if isinstance(acao, CampoFormularioAlterado):
        if acao.campo not in CAMPOS_EDITAVEIS:
            raise ValueError(f"Campo desconhecido: {acao.campo!r}")
        formulario = replace(estado.formulario, **{acao.campo: acao.valor})
        return replace(estado, formulario=formulario)

    if isinstance(acao, TransacaoRegistrada):
        formulario = EstadoFormulario(tipo=estado.formulario.tipo, data=acao.hoje)
        return replace(estado, formulario=formulario, aba="historico")

    if isinstance(acao, Desconectado):
        return EstadoApp(carregando=False)

    raise TypeError(f"Ação desconhecida: {type(acao).__name__}")


# --- Seletores ---

def totais(estado: EstadoApp) -> Totais:
    return calcular_totais(estado.transacoes)


def transacoes_visiveis(estado: EstadoApp):
    return filtrar_transacoes(estado.transacoes, estado.filtro_tipo, estado.busca)


def totais_visiveis(estado: EstadoApp) -> Totais:
    return calcular_totais(transacoes_visiveis(estado))


def categorias_do_formulario(estado: EstadoApp):
    return categorias_do_tipo(estado.formulario.tipo)
