from pydantic import BaseModel
from typing import List

class TemaRead(BaseModel):
    modo_escuro: bool

class AnexoRead(BaseModel):
    id: str
    name: str
    size: int
    uploadedAt: str

class ListaAnexos(BaseModel):
    anexos: List[AnexoRead]
    total_bytes: int
