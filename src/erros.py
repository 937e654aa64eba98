# -*- coding: utf-8 -*-
"""
Exceções de domínio da tesouraria.

As rotas FastAPI traduzem cada uma delas para o HTTPException adequado.
"""


class ErroTesouraria(Exception):
    """Base de todos os erros da aplicação."""

    def __init__(self, mensagem):
        super().__init__(mensagem)
        self.mensagem = mensagem


class ErroValidacao(ErroTesouraria):
    """Formulário incompleto ou inválido. Nenhuma escrita é feita."""

    def __init__(self, mensagem, campos=None):
        super().__init__(mensagem)
        self.campos = list(campos or [])


class ErroAutenticacao(ErroTesouraria):
    def __init__(self, codigo, mensagem):
        super().__init__(mensagem)
        self.codigo = codigo


class ErroArmazenamento(ErroTesouraria):
    """Falha ao gravar ou excluir no banco de dados."""

    def __init__(self, mensagem, indice=None):
        super().__init__(mensagem)
        # posição do item que falhou, em gravações em lote
        self.indice = indice


class ErroAnexo(ErroTesouraria):
    """Arquivo recusado como comprovante (tipo ou tamanho)."""
