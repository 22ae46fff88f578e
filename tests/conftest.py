# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from taskboard.config import Settings
from taskboard.credentials import CredentialStore
from taskboard.database import create_db_engine, create_tables
from taskboard.main import create_app
from taskboard.models import User

from .fakes import FakeClock

EXTERNAL_SECRET = "external-test-secret"
EXTERNAL_AUDIENCE = "taskboard-tests"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file per test."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'taskboard.db'}",
        secret_key="test-secret",
        cors_origins=("http://testserver",),
        external_auth_secret=EXTERNAL_SECRET,
        external_auth_audience=EXTERNAL_AUDIENCE,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def engine(settings: Settings):
    engine = create_db_engine(settings.database_url)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine) -> Session:
    with Session(engine) as session:
        yield session


@pytest.fixture()
def ann(session: Session) -> User:
    return CredentialStore(session).register(name="Ann", email="ann@x.com", password="secret1")


@pytest.fixture()
def bob(session: Session) -> User:
    return CredentialStore(session).register(name="Bob", email="bob@x.com", password="secret2")


@pytest.fixture()
def app(settings: Settings, clock: FakeClock):
    app = create_app(settings, clock=clock)
    yield app
    app.state.engine.dispose()


@pytest.fixture()
def client(app) -> TestClient:
    with TestClient(app) as client:
        yield client


def register_and_get_headers(client: TestClient, name: str, email: str, password: str = "secret1") -> dict:
    """Register through the REST API and return bearer headers.

    Cookies are dropped so each call is authenticated only by the header it is given.
    """
    response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
