"""Shared test fixtures: a fresh SQLite database and app per test."""
import os

# Must be set before app modules read settings at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.config import Settings  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models import User  # noqa: E402

API = "/api/v1"
PASSWORD = "secret123"


@pytest.fixture
def app(tmp_path):
    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'kogase.db'}",
        environment="test",
        jwt_secret="test-secret",
    )
    application = create_app(settings)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def session_factory(app):
    """Open sessions with `with session_factory() as db:` so SQLite locks are released."""
    return app.state.session_factory


def register(client, email, name="Dev", password=PASSWORD):
    resp = client.post(f"{API}/auth/register", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 201, resp.text
    return resp.json()


def login(client, email, password=PASSWORD):
    resp = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def sdk_headers(api_key):
    return {"X-Kogase-API-Key": api_key}


def create_project(client, token, name="My Game"):
    resp = client.post(f"{API}/dashboard/projects", json={"name": name}, headers=auth_headers(token))
    assert resp.status_code == 201, resp.text
    return resp.json()


def make_admin(session_factory, email):
    with session_factory() as db:
        user = db.query(User).filter(User.email == email).one()
        user.role = "admin"
        db.commit()


@pytest.fixture
def developer(client):
    """A registered developer: (user, token)."""
    user = register(client, "dev@example.com", name="Dev")
    return user, login(client, "dev@example.com")


@pytest.fixture
def project(client, developer):
    """A project owned by the developer fixture, including its API key."""
    _, token = developer
    return create_project(client, token)
