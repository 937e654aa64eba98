import json

import pytest
from starlette.websockets import WebSocketDisconnect

PDF = b"%PDF-1.4\n%%EOF"


def _form(**mudancas):
    dados = {
        "tipo": "entrada",
        "categoria": "dizimo",
        "valor": "100",
        "descricao": "Dízimos do culto",
        "data": "2024-01-07",
        "responsavel": "Maria",
    }
    dados.update(mudancas)
    return dados


@pytest.fixture
def com_transacoes(client, auth_headers):
    client.post("/api/v1/transacoes", json=_form(), headers=auth_headers)
    client.post(
        "/api/v1/transacoes",
        json=_form(tipo="saida", categoria="aluguel", valor=40, descricao="Aluguel do salão",
                   data="2024-01-10", responsavel="João"),
        headers=auth_headers,
    )


def test_criar_transacao(client, auth_headers):
    resp = client.post("/api/v1/transacoes", json=_form(), headers=auth_headers)

    assert resp.status_code == 201
    criada = resp.json()
    assert criada["tipo"] == "entrada"
    assert criada["valor"] == 100.0
    assert criada["user_id"] is not None


def test_descricao_vazia_nao_grava_nada(client, auth_headers, repositorio):
    resp = client.post("/api/v1/transacoes", json=_form(descricao=""), headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Por favor, preencha todos os campos obrigatórios."
    assert repositorio.snapshot() == ()


def test_historico_com_totais(client, auth_headers, com_transacoes):
    resp = client.get("/api/v1/transacoes", headers=auth_headers)

    assert resp.status_code == 200
    corpo = resp.json()
    assert [t["categoria"] for t in corpo["transacoes"]] == ["aluguel", "dizimo"]
    assert corpo["totais"] == {"entradas": 100.0, "saidas": 40.0, "saldo": 60.0}


def test_historico_filtrado_por_tipo(client, auth_headers, com_transacoes):
    resp = client.get("/api/v1/transacoes", params={"tipo": "saida"}, headers=auth_headers)

    corpo = resp.json()
    assert [t["descricao"] for t in corpo["transacoes"]] == ["Aluguel do salão"]
    assert corpo["totais"] == {"entradas": 0.0, "saidas": 40.0, "saldo": -40.0}


def test_historico_com_busca(client, auth_headers, com_transacoes):
    resp = client.get("/api/v1/transacoes", params={"busca": "joão"}, headers=auth_headers)
    assert [t["responsavel"] for t in resp.json()["transacoes"]] == ["João"]


def test_filtro_invalido(client, auth_headers):
    resp = client.get("/api/v1/transacoes", params={"tipo": "income"}, headers=auth_headers)
    assert resp.status_code == 400


def test_excluir(client, auth_headers, com_transacoes):
    transacoes = client.get("/api/v1/transacoes", headers=auth_headers).json()["transacoes"]

    resp = client.delete(f"/api/v1/transacoes/{transacoes[0]['id']}", headers=auth_headers)
    assert resp.status_code == 204

    restantes = client.get("/api/v1/transacoes", headers=auth_headers).json()["transacoes"]
    assert len(restantes) == 1

    assert client.delete(f"/api/v1/transacoes/{transacoes[0]['id']}", headers=auth_headers).status_code == 404


def test_dashboard(client, auth_headers, com_transacoes):
    resp = client.get("/api/v1/dashboard", headers=auth_headers)

    assert resp.status_code == 200
    corpo = resp.json()
    assert corpo["totais"] == {"entradas": 100.0, "saidas": 40.0, "saldo": 60.0}
    assert [t["valor_formatado"] for t in corpo["recentes"]] == ["- R$ 40,00", "+ R$ 100,00"]
    assert corpo["recentes"][0]["data_formatada"] == "10/01/2024"
    assert corpo["categorias"] == [
        {"categoria": "dizimo", "total": 100.0, "count": 1},
        {"categoria": "aluguel", "total": 40.0, "count": 1},
    ]


def test_dashboard_limita_recentes_a_cinco(client, auth_headers):
    for dia in range(1, 8):
        client.post("/api/v1/transacoes", json=_form(data=f"2024-02-0{dia}"), headers=auth_headers)
    recentes = client.get("/api/v1/dashboard", headers=auth_headers).json()["recentes"]
    assert [t["data"] for t in recentes] == [f"2024-02-0{d}" for d in range(7, 2, -1)]


def test_importar(client, auth_headers):
    registros = [
        {"type": "entrada", "category": "oferta", "amount": 50, "description": "x",
         "date": "2024-01-01", "responsible": "y"},
        {"type": "saida", "category": "luz", "amount": 20, "description": "conta",
         "date": "2024-01-02", "responsible": "z"},
    ]

    resp = client.post("/api/v1/transacoes/importar", json=registros, headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json()["importados"] == 2
    transacoes = client.get("/api/v1/transacoes", headers=auth_headers).json()["transacoes"]
    assert [(t["tipo"], t["categoria"]) for t in transacoes] == [("saida", "luz"), ("entrada", "oferta")]


def test_importar_com_item_invalido(client, auth_headers):
    registros = [
        {"type": "entrada", "category": "oferta", "amount": 50, "description": "x",
         "date": "2024-01-01", "responsible": "y"},
        {"type": "entrada", "category": "oferta", "amount": "cinquenta", "description": "x",
         "date": "2024-01-01", "responsible": "y"},
    ]

    resp = client.post("/api/v1/transacoes/importar", json=registros, headers=auth_headers)

    assert resp.status_code == 400
    relatorio = resp.json()
    assert relatorio["importados"] == 0
    assert relatorio["falhas"][0]["indice"] == 1
    assert client.get("/api/v1/transacoes", headers=auth_headers).json()["transacoes"] == []


def test_exportar_backup(client, auth_headers, com_transacoes):
    resp = client.get("/api/v1/transacoes/exportar", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    assert "tesouraria_backup_" in resp.headers["content-disposition"]
    dados = json.loads(resp.content.decode("utf-8"))
    assert {d["type"] for d in dados} == {"entrada", "saida"}
    assert set(dados[0]) == {"id", "type", "category", "amount", "description", "date", "responsible"}


def test_categorias_por_tipo(client):
    resp = client.get("/api/v1/categorias", params={"tipo": "saida"})
    valores = [c["value"] for c in resp.json()]
    assert valores == ["aluguel", "luz", "agua", "manutencao", "evangelismo",
                       "missoes", "assistencia", "salarios", "outros"]
    assert client.get("/api/v1/categorias", params={"tipo": "x"}).status_code == 400


def test_modo_escuro_persistido(client):
    assert client.get("/api/v1/configuracoes/tema").json() == {"modo_escuro": False}
    assert client.put("/api/v1/configuracoes/tema", json={"modo_escuro": True}).status_code == 200
    assert client.get("/api/v1/configuracoes/tema").json() == {"modo_escuro": True}


def test_anexos_pdf(client, auth_headers):
    resp = client.post(
        "/api/v1/configuracoes/anexos",
        files={"arquivo": ("recibo.pdf", PDF, "application/pdf")},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    anexo = resp.json()
    assert anexo["name"] == "recibo.pdf"
    assert anexo["size"] == len(PDF)

    lista = client.get("/api/v1/configuracoes/anexos", headers=auth_headers).json()
    assert [a["id"] for a in lista["anexos"]] == [anexo["id"]]
    assert lista["total_bytes"] == len(PDF)

    download = client.get(f"/api/v1/configuracoes/anexos/{anexo['id']}", headers=auth_headers)
    assert download.content == PDF

    assert client.delete(f"/api/v1/configuracoes/anexos/{anexo['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/v1/configuracoes/anexos/{anexo['id']}", headers=auth_headers).status_code == 404


def test_anexo_que_nao_e_pdf(client, auth_headers):
    resp = client.post(
        "/api/v1/configuracoes/anexos",
        files={"arquivo": ("planilha.csv", b"a,b\n1,2\n", "text/csv")},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Por favor, selecione um arquivo PDF (.pdf)."
    assert client.get("/api/v1/configuracoes/anexos", headers=auth_headers).json()["anexos"] == []


def test_tempo_real_via_websocket(client, token, auth_headers):
    with client.websocket_connect(f"/api/v1/transacoes/ws?token={token}") as ws:
        assert ws.receive_json() == []

        client.post("/api/v1/transacoes", json=_form(), headers=auth_headers)

        snapshot = ws.receive_json()
        assert len(snapshot) == 1
        assert snapshot[0]["categoria"] == "dizimo"


def test_websocket_sem_token_valido(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/api/v1/transacoes/ws?token=invalido") as ws:
            ws.receive_json()


def test_websocket_nao_prende_conexao_do_banco(client, token, engine):
    with client.websocket_connect(f"/api/v1/transacoes/ws?token={token}") as ws:
        assert ws.receive_json() == []
        assert engine.pool.checkedout() == 0


def test_upload_de_anexo_em_paralelo(client, auth_headers):
    from concurrent.futures import ThreadPoolExecutor

    def enviar(i):
        return client.post(
            "/api/v1/configuracoes/anexos",
            files={"arquivo": (f"{i}.pdf", PDF, "application/pdf")},
            headers=auth_headers,
        ).status_code

    with ThreadPoolExecutor(max_workers=4) as executor:
        assert list(executor.map(enviar, range(4))) == [201] * 4

    lista = client.get("/api/v1/configuracoes/anexos", headers=auth_headers).json()
    assert sorted(a["name"] for a in lista["anexos"]) == ["0.pdf", "1.pdf", "2.pdf", "3.pdf"]
