"""
tests/conftest.py -- Shared test fixtures for People API integration tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + people
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - auth_client: TestClient for the authenticated service
  - open_client: TestClient for the service running with AUTH_ENABLED=false
  - legacy_client: authenticated service with LEGACY_STATUS_CODES=true
  - login(): helper that signs up and logs in, leaving the cookie in the client

The app is a module-level singleton and each fixture rewrites app.state, so a
test module must use only one of the client fixtures.

Named shared-memory SQLite URIs (not plain :memory:) are required because
TestClient runs sync route handlers in a thread pool. Plain :memory: DBs are
per-connection and would present a blank schema to each worker thread.

The DEBUG env var must be set before any auth module import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# Set DEBUG before any auth/core import so get_settings() can auto-generate
# SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import UserStore
from people.store import PersonStore

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, PersonStore]:
    """Create isolated named shared-memory SQLite stores.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    url = f"sqlite:///file:test_people_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(url), PersonStore(url)


def _patch_lifespan(user_store: UserStore, person_store: PersonStore, *, auth_enabled: bool, legacy: bool):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.person_store = person_store
        app.state.auth_enabled = auth_enabled
        app.state.legacy_status_codes = legacy
        yield

    return test_lifespan


def _client(db_suffix: str, *, auth_enabled: bool = True, legacy: bool = False) -> Generator[TestClient, None, None]:
    user_store, person_store = _make_test_stores(db_suffix)
    app.router.lifespan_context = _patch_lifespan(
        user_store, person_store, auth_enabled=auth_enabled, legacy=legacy
    )
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client
    user_store.close()
    person_store.close()


def login(client: TestClient, username: str, password: str = "correct-horse") -> None:
    """Sign up (ignoring an existing account) and log in; the cookie stays in the client jar."""
    client.post("/signup", json={"username": username, "password": password})
    resp = client.post("/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def auth_client(request) -> Generator[TestClient, None, None]:
    """TestClient for the authenticated service with a per-module database."""
    yield from _client(f"auth_{request.module.__name__}")


@pytest.fixture(scope="module")
def open_client(request) -> Generator[TestClient, None, None]:
    """TestClient for the service without auth: /people is public."""
    yield from _client(f"open_{request.module.__name__}", auth_enabled=False)


@pytest.fixture(scope="module")
def legacy_client(request) -> Generator[TestClient, None, None]:
    """TestClient reproducing the original 400-unauthorized / 204-delete statuses."""
    yield from _client(f"legacy_{request.module.__name__}", legacy=True)


@pytest.fixture
def client(auth_client: TestClient) -> TestClient:
    """auth_client with an empty cookie jar, so each test starts logged out."""
    auth_client.cookies.clear()
    return auth_client
