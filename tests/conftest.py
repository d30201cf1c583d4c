import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from shared_todos.database import get_session
from shared_todos.events import VersionCounter
from shared_todos.main import app


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(engine):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    app.state.todos_version = VersionCounter()
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="signup")
def signup_fixture(client):
    """Post the signup form; the client keeps the session cookie."""
    def _signup(username: str, password: str = "pw1", **extra):
        data = {"username": username, "password": password, "password_confirmation": password}
        data.update(extra)
        return client.post("/account/signup", data=data)

    return _signup
