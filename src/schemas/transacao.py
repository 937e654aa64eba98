# src/schemas/transacao.py
from pydantic import BaseModel, Field
from typing import Any, List, Literal, Optional
from datetime import date, datetime
from decimal import Decimal


class FormularioTransacao(BaseModel):
    """Dados como chegam do formulário; a validação fica em src.validacao."""
    tipo: str = "entrada"
    categoria: Optional[str] = None
    valor: Optional[Any] = None
    descricao: Optional[str] = None
    data: Optional[str] = None
    responsavel: Optional[str] = None


class TransacaoCreate(BaseModel):
    tipo: Literal["entrada", "saida"]
    categoria: str
    valor: Decimal = Field(..., ge=0)
    descricao: str
    data: date
    responsavel: str


class TransacaoRead(BaseModel):
    id: int
    tipo: str
    categoria: str
    valor: float
    descricao: str
    data: date
    responsavel: str
    created_at: Optional[datetime] = None
    user_id: Optional[int] = None

    class Config:
        from_attributes = True
        frozen = True


class TotaisRead(BaseModel):
    entradas: float
    saidas: float
    saldo: float

    @classmethod
    def de(cls, totais):
        return cls(entradas=float(totais.entradas), saidas=float(totais.saidas), saldo=float(totais.saldo))


class ListaTransacoes(BaseModel):
    transacoes: List[TransacaoRead]
    totais: TotaisRead


# --- Importação / exportação (convenção externa de nomes) ---

class RegistroExterno(BaseModel):
    id: Optional[Any] = None
    type: Optional[Any] = None
    category: Optional[Any] = None
    amount: Optional[Any] = None
    description: Optional[Any] = None
    date: Optional[Any] = None
    responsible: Optional[Any] = None


class FalhaImportacao(BaseModel):
    indice: int
    erro: str


class RelatorioImportacao(BaseModel):
    total: int
    importados: int
    falhas: List[FalhaImportacao] = []

    @property
    def sucesso(self):
        return not self.falhas


# --- Dashboard ---

class TransacaoRecente(TransacaoRead):
    valor_formatado: str
    data_formatada: str


class CategoriaResumoRead(BaseModel):
    categoria: str
    total: float
    count: int


class DashboardRead(BaseModel):
    totais: TotaisRead
    recentes: List[TransacaoRecente]
    categorias: List[CategoriaResumoRead]


class CategoriaOpcao(BaseModel):
    value: str
    label: str
