# Em src/routes/dashboard_fastapi.py

from fastapi import APIRouter, Depends

from src import auth
from src.agregacao import calcular_totais, resumo_por_categoria, top_categorias
from src.formatacao import formatar_data_br, formatar_valor_transacao
from src.models.usuario import Usuario
from src.repositorio import get_repositorio
from src.schemas.transacao import DashboardRead, TotaisRead

TRANSACOES_RECENTES = 5

router = APIRouter(
    tags=["Dashboard"],
)

@router.get("", response_model=DashboardRead)
def get_dashboard(repositorio=Depends(get_repositorio), current_user: Usuario = Depends(auth.get_current_user)):
    """
    Totais gerais, as transações mais recentes e as categorias de maior valor.
    """
    transacoes = repositorio.snapshot()

    recentes = [
        {
            **t.model_dump(),
            "valor_formatado": formatar_valor_transacao(t),
            "data_formatada": formatar_data_br(t.data),
        }
        for t in transacoes[:TRANSACOES_RECENTES]
    ]

    categorias = [
        {"categoria": nome, "total": float(resumo.total), "count": resumo.count}
        for nome, resumo in top_categorias(resumo_por_categoria(transacoes))
    ]

    return {
        "totais": TotaisRead.de(calcular_totais(transacoes)),
        "recentes": recentes,
        "categorias": categorias,
    }
