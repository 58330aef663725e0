import pytest
from fastapi.testclient import TestClient

from src.adapters.memory import InMemoryCredentialStore, InMemoryPostStore, InMemoryProfileStore
from src.api.deps import get_context
from src.api.main import app
from src.app_shell.context import ServiceContext
from src.components.bootstrap import bootstrap_admin


@pytest.fixture
def api_ctx(rules, clock, hasher):
    ctx = ServiceContext.build(
        rules,
        InMemoryPostStore(),
        InMemoryProfileStore(),
        InMemoryCredentialStore(),
        clock,
    )
    ctx.identity.hasher = hasher
    return ctx


@pytest.fixture
def client(api_ctx):
    app.dependency_overrides[get_context] = lambda: api_ctx
    # No context manager: the startup hook (rules file, SQLite) is not needed here.
    yield TestClient(app)
    app.dependency_overrides.clear()


def login(client: TestClient, email: str, password: str) -> dict[str, str]:
    resp = client.post("/api/auth/login", data={"username": email, "password": password})
    assert resp.status_code == 200, resp.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, api_ctx):
    bootstrap_admin(api_ctx.identity, api_ctx.rules, "admin@example.com", "admin-pass")
    return login(client, "admin@example.com", "admin-pass")


@pytest.fixture
def writer(client, api_ctx, admin_headers):
    profile = api_ctx.identity.sign_up("writer@example.com", "writer-pass")
    resp = client.put(
        f"/api/users/{profile.id}/roles", json={"roles": ["writer", "user"]}, headers=admin_headers
    )
    assert resp.status_code == 200, resp.text
    return profile


@pytest.fixture
def writer_headers(client, writer):
    return login(client, "writer@example.com", "writer-pass")


@pytest.fixture
def reader_headers(client, api_ctx):
    api_ctx.identity.sign_up("reader@example.com", "reader-pass")
    return login(client, "reader@example.com", "reader-pass")
