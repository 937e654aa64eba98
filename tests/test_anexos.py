from datetime import datetime, timezone

import pytest

from src.anexos import (
    MENSAGEM_TIPO_INVALIDO,
    conteudo_do_anexo,
    listar_anexos,
    obter_anexo,
    remover_anexo,
    salvar_pdf,
)
from src.armazenamento_local import CHAVE_ANEXOS
from src.erros import ErroAnexo

PDF = b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF"
AGORA = datetime(2024, 4, 1, 12, 0, tzinfo=timezone.utc)


def test_salva_pdf_como_data_uri(armazenamento):
    anexo = salvar_pdf(armazenamento, "recibo.pdf", "application/pdf", PDF, agora=AGORA)

    assert anexo["id"] == f"pdf_{int(AGORA.timestamp() * 1000)}"
    assert anexo["name"] == "recibo.pdf"
    assert anexo["size"] == len(PDF)
    assert anexo["uploadedAt"].startswith("2024-04-01T12:00:00")
    assert anexo["dataUrl"].startswith("data:application/pdf;base64,")

    guardados = armazenamento.ler_json(CHAVE_ANEXOS)
    assert [a["id"] for a in guardados] == [anexo["id"]]
    assert conteudo_do_anexo(guardados[0]) == PDF


def test_recusa_arquivo_que_nao_e_pdf(armazenamento):
    with pytest.raises(ErroAnexo) as exc:
        salvar_pdf(armazenamento, "foto.png", "image/png", b"\x89PNG")
    assert exc.value.mensagem == MENSAGEM_TIPO_INVALIDO
    assert armazenamento.get_item(CHAVE_ANEXOS) is None


def test_recusa_arquivo_acima_do_limite(armazenamento):
    with pytest.raises(ErroAnexo):
        salvar_pdf(armazenamento, "grande.pdf", "application/pdf", PDF, limite_arquivo=10)
    assert listar_anexos(armazenamento) == []


def test_recusa_quando_a_cota_total_acaba(armazenamento):
    limite = len(PDF) * 2
    salvar_pdf(armazenamento, "a.pdf", "application/pdf", PDF, agora=AGORA, limite_total=limite)
    salvar_pdf(armazenamento, "b.pdf", "application/pdf", PDF, agora=AGORA, limite_total=limite)

    with pytest.raises(ErroAnexo):
        salvar_pdf(armazenamento, "c.pdf", "application/pdf", PDF, agora=AGORA, limite_total=limite)

    assert [a["name"] for a in listar_anexos(armazenamento)] == ["a.pdf", "b.pdf"]


def test_ids_nao_se_repetem_no_mesmo_instante(armazenamento):
    a = salvar_pdf(armazenamento, "a.pdf", "application/pdf", PDF, agora=AGORA)
    b = salvar_pdf(armazenamento, "b.pdf", "application/pdf", PDF, agora=AGORA)
    assert a["id"] != b["id"]


def test_remover_anexo(armazenamento):
    anexo = salvar_pdf(armazenamento, "a.pdf", "application/pdf", PDF)

    assert remover_anexo(armazenamento, anexo["id"]) is True
    assert obter_anexo(armazenamento, anexo["id"]) is None
    assert remover_anexo(armazenamento, anexo["id"]) is False


def test_armazenamento_corrompido_e_tratado_como_vazio(armazenamento):
    armazenamento.set_item(CHAVE_ANEXOS, "{nao e json")
    assert listar_anexos(armazenamento) == []


def test_envios_simultaneos_nao_se_perdem(armazenamento):
    from concurrent.futures import ThreadPoolExecutor

    nomes = [f"{i}.pdf" for i in range(8)]
    with ThreadPoolExecutor(max_workers=8) as executor:
        salvos = list(executor.map(
            lambda nome: salvar_pdf(armazenamento, nome, "application/pdf", PDF, agora=AGORA),
            nomes,
        ))

    guardados = listar_anexos(armazenamento)
    assert sorted(a["name"] for a in guardados) == sorted(nomes)
    assert len({a["id"] for a in guardados}) == len(nomes)
    assert {a["id"] for a in salvos} == {a["id"] for a in guardados}


def test_cota_respeitada_com_envios_simultaneos(armazenamento):
    from concurrent.futures import ThreadPoolExecutor

    limite = len(PDF) * 3

    def enviar(nome):
        try:
            return salvar_pdf(armazenamento, nome, "application/pdf", PDF, limite_total=limite)
        except ErroAnexo:
            return None

    with ThreadPoolExecutor(max_workers=6) as executor:
        resultados = list(executor.map(enviar, [f"{i}.pdf" for i in range(6)]))

    assert len([r for r in resultados if r]) == 3
    assert len(listar_anexos(armazenamento)) == 3


def test_remocao_simultanea_a_envio_preserva_o_novo_anexo(armazenamento):
    import threading

    antigo = salvar_pdf(armazenamento, "antigo.pdf", "application/pdf", PDF, agora=AGORA)
    novo = {}

    t1 = threading.Thread(target=remover_anexo, args=(armazenamento, antigo["id"]))
    t2 = threading.Thread(
        target=lambda: novo.update(salvar_pdf(armazenamento, "novo.pdf", "application/pdf", PDF))
    )
    t1.start()
    t2.start()
    t1.join()
    t2.join()

    assert [a["id"] for a in listar_anexos(armazenamento)] == [novo["id"]]


def test_atualizar_json_nao_grava_quando_a_funcao_falha(armazenamento):
    armazenamento.gravar_json("contador", 1)

    def falha(valor):
        raise ErroAnexo("não")

    with pytest.raises(ErroAnexo):
        armazenamento.atualizar_json("contador", falha)

    assert armazenamento.atualizar_json("contador", lambda v: v + 1) == 2
    assert armazenamento.ler_json("contador") == 2
