# tests/conftest.py

import os

# Configure before cortexia.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GROQ_API_KEYS"] = ""
os.environ["GEMINI_API_KEYS"] = ""
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = ""
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

import cortexia.models  # noqa: F401
from cortexia.database import Base, engine, SessionLocal
from cortexia.main import app
from cortexia.services.llm_router import get_llm_router

from .fakes import FakeLLMRouter


@pytest.fixture(autouse=True)
def _fresh_tables():
    """Every test starts from an empty in-memory database."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


def _register(client: TestClient, username: str) -> dict:
    resp = client.post("/api/v1/auth/register", json={"username": username, "password": "secret123"})
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['token']}"}


@pytest.fixture()
def auth_headers(client: TestClient) -> dict:
    return _register(client, "alice")


@pytest.fixture()
def other_headers(client: TestClient) -> dict:
    return _register(client, "bob")


@pytest.fixture()
def user_id(client: TestClient, auth_headers: dict) -> int:
    return client.get("/api/v1/auth/me", headers=auth_headers).json()["id"]


@pytest.fixture()
def fake_router() -> FakeLLMRouter:
    """Replaces the LLM router dependency with a scripted one."""
    router = FakeLLMRouter()
    app.dependency_overrides[get_llm_router] = lambda: router
    return router
