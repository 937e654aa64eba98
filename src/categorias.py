# -*- coding: utf-8 -*-
"""
Categorias permitidas no formulário, por tipo de transação.
"""

ENTRADA = 'entrada'
SAIDA = 'saida'
TODOS = 'todos'

TIPOS = (ENTRADA, SAIDA)
FILTROS = (TODOS, ENTRADA, SAIDA)

CATEGORIAS_ENTRADA = (
    ('dizimo', 'Dízimo'),
    ('oferta', 'Oferta'),
    ('doacao', 'Doação'),
    ('evento', 'Evento'),
    ('outros', 'Outros'),
)

CATEGORIAS_SAIDA = (
    ('aluguel', 'Aluguel'),
    ('luz', 'Luz'),
    ('agua', 'Água'),
    ('manutencao', 'Manutenção'),
    ('evangelismo', 'Evangelismo'),
    ('missoes', 'Missões'),
    ('assistencia', 'Assistência Social'),
    ('salarios', 'Salários'),
    ('outros', 'Outros'),
)

CATEGORIAS_POR_TIPO = {
    ENTRADA: CATEGORIAS_ENTRADA,
    SAIDA: CATEGORIAS_SAIDA,
}


def categorias_do_tipo(tipo):
    """Retorna as opções (valor, rótulo) do tipo; vazio para tipo desconhecido."""
    return CATEGORIAS_POR_TIPO.get(tipo, ())


def categoria_valida(tipo, categoria):
    return any(valor == categoria for valor, _ in categorias_do_tipo(tipo))
