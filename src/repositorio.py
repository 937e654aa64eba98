# -*- coding: utf-8 -*-
"""
Repositório de transações com notificação em tempo real.

Toda gravação confirmada gera um snapshot completo (ordenado por data
decrescente) que é entregue a cada ouvinte inscrito.
"""
import logging
import threading
from typing import Callable, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from src.database import SessionLocal
from src.erros import ErroArmazenamento
from src.models.transacao import Transacao
from src.schemas.transacao import TransacaoCreate, TransacaoRead

logger = logging.getLogger(__name__)

Snapshot = Tuple[TransacaoRead, ...]
Ouvinte = Callable[[Snapshot], None]


class RepositorioTransacoes:

    def __init__(self, session_factory):
        self._session_factory = session_factory
        self._ouvintes: List[Ouvinte] = []
        self._lock = threading.Lock()
        # leitura do snapshot e entrega acontecem juntas, uma gravação por vez
        self._lock_entrega = threading.RLock()

    # --- Leitura ---

    def _ler_snapshot(self, db) -> Snapshot:
        linhas = (
            db.query(Transacao)
            .order_by(Transacao.data.desc(), Transacao.id.desc())
            .all()
        )
        return tuple(TransacaoRead.model_validate(t) for t in linhas)

    def snapshot(self) -> Snapshot:
        with self._session_factory() as db:
            return self._ler_snapshot(db)

    # --- Inscrição ---

    def inscrever(self, ouvinte: Ouvinte) -> Callable[[], None]:
        """
        Registra um ouvinte e entrega o snapshot atual imediatamente.
        Retorna a função que cancela a inscrição.
        """
        with self._lock_entrega:
            with self._lock:
                self._ouvintes.append(ouvinte)
            ouvinte(self.snapshot())

        def cancelar():
            with self._lock:
                if ouvinte in self._ouvintes:
                    self._ouvintes.remove(ouvinte)

        return cancelar

    def _notificar(self):
        """
        Lê o snapshot e entrega a todos os ouvintes sob o mesmo lock, para que
        o último snapshot recebido seja sempre o estado mais recente do banco.
        """
        with self._lock_entrega:
            with self._lock:
                ouvintes = list(self._ouvintes)
            if not ouvintes:
                return
            snap = self.snapshot()
            logger.debug("Entregando snapshot com %d transações a %d ouvinte(s)", len(snap), len(ouvintes))
            for ouvinte in ouvintes:
                try:
                    ouvinte(snap)
                except Exception:
                    logger.exception("Erro em ouvinte de transações")

    # --- Escrita ---

    def criar(self, dados: TransacaoCreate, user_id: Optional[int] = None) -> TransacaoRead:
        with self._session_factory() as db:
            try:
                db_transacao = Transacao(**dados.model_dump(), user_id=user_id)
                db.add(db_transacao)
                db.commit()
                db.refresh(db_transacao)
                criada = TransacaoRead.model_validate(db_transacao)
            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("Erro ao adicionar transação")
                raise ErroArmazenamento(str(e)) from e
        self._notificar()
        return criada

    def criar_em_lote(self, itens: Iterable[TransacaoCreate], user_id: Optional[int] = None) -> List[TransacaoRead]:
        """
        Grava os itens em sequência numa única transação do banco.
        Se algum falhar nada é gravado e ErroArmazenamento traz o índice do item.
        """
        indice = None
        with self._session_factory() as db:
            try:
                criadas = []
                for indice, dados in enumerate(itens):
                    db_transacao = Transacao(**dados.model_dump(), user_id=user_id)
                    db.add(db_transacao)
                    db.flush()
                    criadas.append(db_transacao)
                db.commit()
                resultado = [TransacaoRead.model_validate(t) for t in criadas]
            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("Erro na importação (item %s)", indice)
                raise ErroArmazenamento(str(e), indice=indice) from e
        if resultado:
            self._notificar()
        return resultado

    def excluir(self, transacao_id: int) -> bool:
        """Exclui a transação. Retorna False se ela não existir."""
        with self._session_factory() as db:
            try:
                db_transacao = db.get(Transacao, transacao_id)
                if db_transacao is None:
                    return False
                db.delete(db_transacao)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("Erro ao excluir transação %s", transacao_id)
                raise ErroArmazenamento(str(e)) from e
        self._notificar()
        return True


repositorio = RepositorioTransacoes(SessionLocal)


def get_repositorio():
    return repositorio
