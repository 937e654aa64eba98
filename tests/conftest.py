import os

# Banco em memória só para o import de main; cada teste usa o seu próprio arquivo
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from main import app
from src.armazenamento_local import ArmazenamentoLocal, get_armazenamento
from src.database import Base, get_db, get_session_factory
from src.exportacao import registrar_cache_local
from src.repositorio import RepositorioTransacoes, get_repositorio


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'tesouraria_teste.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def repositorio(session_factory):
    return RepositorioTransacoes(session_factory)


@pytest.fixture
def armazenamento(tmp_path):
    return ArmazenamentoLocal(tmp_path / "local_storage")


@pytest.fixture
def client(session_factory, repositorio, armazenamento):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    cancelar = registrar_cache_local(repositorio, armazenamento)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_repositorio] = lambda: repositorio
    app.dependency_overrides[get_armazenamento] = lambda: armazenamento
    yield TestClient(app)
    app.dependency_overrides.clear()
    cancelar()


@pytest.fixture
def token(client):
    resp = client.post(
        "/api/v1/auth/registrar",
        json={"email": "tesoureiro@igreja.org", "password": "segredo123"},
    )
    assert resp.status_code == 201
    return resp.json()["access_token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
