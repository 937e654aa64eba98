# -*- coding: utf-8 -*-
"""
Rotas FastAPI para as categorias de cada tipo de transação.
"""
from typing import List
from fastapi import APIRouter, HTTPException

from src.categorias import CATEGORIAS_POR_TIPO, categorias_do_tipo
from src.schemas.transacao import CategoriaOpcao

router = APIRouter(
    tags=["Categorias"],
)

@router.get("", response_model=List[CategoriaOpcao])
def read_categorias(tipo: str = "entrada"):
    """
    Lista as categorias aceitas no formulário para o tipo informado.
    """
    if tipo not in CATEGORIAS_POR_TIPO:
        raise HTTPException(status_code=400, detail="Tipo inválido.")
    return [{"value": valor, "label": rotulo} for valor, rotulo in categorias_do_tipo(tipo)]
