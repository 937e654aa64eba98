# -*- coding: utf-8 -*-
"""
Rotas de configurações: tema (modo escuro) e comprovantes em PDF.
"""
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from src import auth
from src.anexos import (
    conteudo_do_anexo, listar_anexos, metadados, obter_anexo, remover_anexo, salvar_pdf, total_bytes,
)
from src.armazenamento_local import CHAVE_MODO_ESCURO, get_armazenamento
from src.erros import ErroAnexo
from src.models.usuario import Usuario
from src.schemas.configuracoes import AnexoRead, ListaAnexos, TemaRead

router = APIRouter(
    tags=["Configurações"],
    responses={404: {"description": "Não encontrado"}},
)


@router.get("/tema", response_model=TemaRead)
def read_tema(armazenamento=Depends(get_armazenamento)):
    return {"modo_escuro": bool(armazenamento.ler_json(CHAVE_MODO_ESCURO, False))}


@router.put("/tema", response_model=TemaRead)
def update_tema(tema: TemaRead, armazenamento=Depends(get_armazenamento)):
    armazenamento.gravar_json(CHAVE_MODO_ESCURO, tema.modo_escuro)
    return tema


# --- Comprovantes (PDF) ---

@router.post("/anexos", response_model=AnexoRead, status_code=status.HTTP_201_CREATED)
def upload_anexo(
    arquivo: UploadFile = File(...),
    armazenamento=Depends(get_armazenamento),
    current_user: Usuario = Depends(auth.get_current_user),
):
    """
    Salva um PDF como comprovante. Ele não cria lançamentos automáticos;
    serve apenas como anexo/arquivo de consulta.
    """
    conteudo = arquivo.file.read()
    try:
        anexo = salvar_pdf(armazenamento, arquivo.filename, arquivo.content_type, conteudo)
    except ErroAnexo as e:
        raise HTTPException(status_code=400, detail=e.mensagem)
    return metadados(anexo)


@router.get("/anexos", response_model=ListaAnexos)
def read_anexos(armazenamento=Depends(get_armazenamento), current_user: Usuario = Depends(auth.get_current_user)):
    anexos = listar_anexos(armazenamento)
    return {"anexos": [metadados(a) for a in anexos], "total_bytes": total_bytes(anexos)}


@router.get("/anexos/{anexo_id}")
def download_anexo(anexo_id: str, armazenamento=Depends(get_armazenamento), current_user: Usuario = Depends(auth.get_current_user)):
    anexo = obter_anexo(armazenamento, anexo_id)
    if not anexo:
        raise HTTPException(status_code=404, detail="Anexo não encontrado")
    nome = quote(anexo.get("name") or f"{anexo_id}.pdf")
    return Response(
        content=conteudo_do_anexo(anexo),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{nome}"},
    )


@router.delete("/anexos/{anexo_id}", status_code=204)
def delete_anexo(anexo_id: str, armazenamento=Depends(get_armazenamento), current_user: Usuario = Depends(auth.get_current_user)):
    if not remover_anexo(armazenamento, anexo_id):
        raise HTTPException(status_code=404, detail="Anexo não encontrado")
    return Response(status_code=204)
