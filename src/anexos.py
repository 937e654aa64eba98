# -*- coding: utf-8 -*-
"""
Comprovantes em PDF guardados no armazenamento local.

Os anexos não têm ligação com nenhuma transação; são apenas arquivos de
consulta. Cada arquivo tem um tamanho máximo e o conjunto tem uma cota total.
Quando a cota é atingida o envio é recusado (nada é descartado automaticamente).
"""
import base64
import logging
from datetime import datetime, timezone
from typing import List, Optional

from src.armazenamento_local import CHAVE_ANEXOS
from src.config import Config
from src.erros import ErroAnexo

logger = logging.getLogger(__name__)

TIPO_PDF = "application/pdf"
PREFIXO_DATA_URL = f"data:{TIPO_PDF};base64,"

MENSAGEM_TIPO_INVALIDO = "Por favor, selecione um arquivo PDF (.pdf)."
MENSAGEM_ARQUIVO_VAZIO = "O arquivo enviado está vazio."


def _mb(n):
    return f"{n / (1024 * 1024):.1f} MB"


def _como_lista(anexos) -> List[dict]:
    return anexos if isinstance(anexos, list) else []


def listar_anexos(armazenamento) -> List[dict]:
    return _como_lista(armazenamento.ler_json(CHAVE_ANEXOS, []))


def total_bytes(anexos) -> int:
    return sum(int(a.get("size") or 0) for a in anexos)


def metadados(anexo: dict) -> dict:
    return {chave: anexo.get(chave) for chave in ("id", "name", "size", "uploadedAt")}


def _novo_id(anexos, agora: datetime) -> str:
    existentes = {a.get("id") for a in anexos}
    base = int(agora.timestamp() * 1000)
    anexo_id = f"pdf_{base}"
    while anexo_id in existentes:
        base += 1
        anexo_id = f"pdf_{base}"
    return anexo_id


def salvar_pdf(armazenamento, nome: str, tipo_mime: str, conteudo: bytes,
               agora: Optional[datetime] = None,
               limite_arquivo: Optional[int] = None,
               limite_total: Optional[int] = None) -> dict:
    """
    Guarda o PDF como data URI. Levanta ErroAnexo sem alterar o armazenamento
    se o arquivo não for PDF ou ultrapassar os limites.
    """
    if tipo_mime != TIPO_PDF:
        raise ErroAnexo(MENSAGEM_TIPO_INVALIDO)
    if not conteudo:
        raise ErroAnexo(MENSAGEM_ARQUIVO_VAZIO)

    limite_arquivo = limite_arquivo or Config.MAX_PDF_BYTES
    limite_total = limite_total or Config.MAX_ANEXOS_BYTES

    tamanho = len(conteudo)
    if tamanho > limite_arquivo:
        raise ErroAnexo(f"O PDF excede o tamanho máximo de {_mb(limite_arquivo)}.")

    agora = agora or datetime.now(timezone.utc)
    data_url = PREFIXO_DATA_URL + base64.b64encode(conteudo).decode("ascii")
    anexo = {}

    def acrescentar(guardados):
        anexos = _como_lista(guardados)
        if total_bytes(anexos) + tamanho > limite_total:
            raise ErroAnexo(
                f"Espaço para comprovantes esgotado ({_mb(limite_total)}). "
                "Exclua anexos antigos antes de enviar novos."
            )
        anexo.update({
            "id": _novo_id(anexos, agora),
            "name": nome,
            "size": tamanho,
            "uploadedAt": agora.isoformat(),
            "dataUrl": data_url,
        })
        return anexos + [anexo]

    armazenamento.atualizar_json(CHAVE_ANEXOS, acrescentar, [])
    logger.info("Comprovante %s salvo (%s, %d bytes)", anexo["id"], nome, tamanho)
    return anexo


def obter_anexo(armazenamento, anexo_id: str) -> Optional[dict]:
    for anexo in listar_anexos(armazenamento):
        if anexo.get("id") == anexo_id:
            return anexo
    return None


def conteudo_do_anexo(anexo: dict) -> bytes:
    data_url = anexo.get("dataUrl") or ""
    _, _, dados = data_url.partition(",")
    return base64.b64decode(dados)


def remover_anexo(armazenamento, anexo_id: str) -> bool:
    removidos = []

    def retirar(guardados):
        anexos = _como_lista(guardados)
        restantes = [a for a in anexos if a.get("id") != anexo_id]
        removidos.extend(a for a in anexos if a.get("id") == anexo_id)
        return restantes

    armazenamento.atualizar_json(CHAVE_ANEXOS, retirar, [])
    if not removidos:
        return False
    logger.info("Comprovante %s removido", anexo_id)
    return True
