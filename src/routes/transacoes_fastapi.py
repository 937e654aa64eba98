# src/routes/transacoes_fastapi.py
# -*- coding: utf-8 -*-
import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from src import auth
from src.agregacao import calcular_totais
from src.armazenamento_local import get_armazenamento
from src.categorias import TODOS
from src.database import get_session_factory
from src.erros import ErroArmazenamento, ErroValidacao
from src.exportacao import exportar_backup
from src.filtros import filtrar_transacoes
from src.importacao import importar_transacoes
from src.models.usuario import Usuario
from src.repositorio import get_repositorio
from src.schemas.transacao import (
    FormularioTransacao, ListaTransacoes, RegistroExterno, RelatorioImportacao,
    TotaisRead, TransacaoRead,
)
from src.validacao import validar_formulario

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Transações"],
    responses={404: {"description": "Não encontrado"}},
)


@router.get("", response_model=ListaTransacoes)
def read_transacoes(
    tipo: str = TODOS,
    busca: str = "",
    repositorio=Depends(get_repositorio),
    current_user: Usuario = Depends(auth.get_current_user),
):
    """Histórico filtrado por tipo e busca, com os totais do que foi filtrado."""
    try:
        filtradas = filtrar_transacoes(repositorio.snapshot(), tipo, busca)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"transacoes": filtradas, "totais": TotaisRead.de(calcular_totais(filtradas))}


@router.post("", response_model=TransacaoRead, status_code=status.HTTP_201_CREATED)
def create_transacao(
    formulario: FormularioTransacao,
    repositorio=Depends(get_repositorio),
    current_user: Usuario = Depends(auth.get_current_user),
):
    try:
        dados = validar_formulario(formulario)
    except ErroValidacao as e:
        raise HTTPException(status_code=400, detail=e.mensagem)

    try:
        return repositorio.criar(dados, user_id=current_user.id)
    except ErroArmazenamento as e:
        raise HTTPException(status_code=500, detail=f"Erro ao salvar no banco de dados: {e.mensagem or 'Erro desconhecido'}")


@router.delete("/{transacao_id}", status_code=204)
def delete_transacao(
    transacao_id: int,
    repositorio=Depends(get_repositorio),
    current_user: Usuario = Depends(auth.get_current_user),
):
    try:
        excluida = repositorio.excluir(transacao_id)
    except ErroArmazenamento as e:
        raise HTTPException(status_code=500, detail=f"Erro ao excluir: {e.mensagem}")
    if not excluida:
        raise HTTPException(status_code=404, detail="Não encontrado")
    logger.info("Transação %s excluída por %s", transacao_id, current_user.email)
    return Response(status_code=204)


@router.post("/importar", response_model=RelatorioImportacao)
def importar(
    registros: List[RegistroExterno],
    repositorio=Depends(get_repositorio),
    current_user: Usuario = Depends(auth.get_current_user),
):
    relatorio = importar_transacoes(repositorio, registros, user_id=current_user.id)
    if not relatorio.sucesso:
        return JSONResponse(status_code=400, content=jsonable_encoder(relatorio))
    return relatorio


@router.get("/exportar")
def exportar(
    armazenamento=Depends(get_armazenamento),
    current_user: Usuario = Depends(auth.get_current_user),
):
    nome_arquivo, conteudo = exportar_backup(armazenamento)
    return Response(
        content=conteudo.encode("utf-8"),
        media_type="application/json; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{nome_arquivo}"'},
    )


# --- TEMPO REAL ---

async def _aguardar_desconexao(websocket: WebSocket):
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass


def _usuario_do_token(token: str, session_factory):
    with session_factory() as db:
        return auth.usuario_do_token(token, db)


@router.websocket("/ws")
async def transacoes_ao_vivo(
    websocket: WebSocket,
    token: str = "",
    session_factory=Depends(get_session_factory),
    repositorio=Depends(get_repositorio),
):
    """Envia o snapshot completo das transações a cada alteração."""
    # sessão curta: a inscrição não deve prender uma conexão do pool
    user = await run_in_threadpool(_usuario_do_token, token, session_factory)
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await websocket.accept()

    loop = asyncio.get_running_loop()
    fila: asyncio.Queue = asyncio.Queue()

    def ouvinte(snapshot):
        # chamado nas threads de trabalho que fizeram a gravação
        loop.call_soon_threadsafe(fila.put_nowait, snapshot)

    cancelar = await run_in_threadpool(repositorio.inscrever, ouvinte)
    desconexao = asyncio.ensure_future(_aguardar_desconexao(websocket))
    try:
        while True:
            proximo = asyncio.ensure_future(fila.get())
            prontos, _ = await asyncio.wait({proximo, desconexao}, return_when=asyncio.FIRST_COMPLETED)
            if proximo not in prontos:
                proximo.cancel()
                break
            await websocket.send_json(jsonable_encoder(list(proximo.result())))
    finally:
        cancelar()
        desconexao.cancel()
        logger.debug("Inscrição em tempo real encerrada para %s", user.email)
