import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from corestack import models  # noqa: F401
from corestack.database import Base, get_db
from corestack.main import app
from corestack.services.llm_client import get_llm_client
from tests.fakes import FakeLLM


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, fake_llm):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    def _register(username="alice", email="alice@example.com", password="s3cret-pass"):
        response = client.post("/api/auth/register", json={
            "username": username,
            "email": email,
            "password": password,
            "repeat_password": password,
        })
        assert response.status_code == 200, response.text
        login = client.post("/api/auth/login", data={"username": email, "password": password})
        assert login.status_code == 200, login.text
        return login.json()
    return _register


@pytest.fixture
def auth_headers(register_user):
    tokens = register_user()
    return {"Authorization": f"Bearer {tokens['access_token']}"}
