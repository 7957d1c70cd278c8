"""
tests/conftest.py -- Shared test fixtures for TaskDesk unit and integration tests.

This module provides:
  - _memory_url(): named shared-memory SQLite URL, unique per call site
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient plus an ADMIN account and its bearer token
  - user_auth: a USER account and its bearer token on the same client
  - account_store / todo_store / codec: isolated objects for unit tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

The DEBUG env var must be set before any auth module import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any auth/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from api.main import app
from auth.models import Account, AccountRole
from auth.passwords import hash_password
from auth.store import AccountStore
from auth.tokens import TokenCodec, get_token_codec
from todos.store import TodoStore

TEST_SECRET = "k" * 32

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "AdminPass123"
USER_EMAIL = "user@example.com"
USER_PASSWORD = "UserPass123"


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _memory_url(name: str) -> str:
    """Return a named shared-memory SQLite URL that no other test shares."""
    return f"sqlite:///file:{name}_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


def _patch_lifespan(account_store: AccountStore, todo_store: TodoStore, codec: TokenCodec):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores and the codec into app.state so TestClient
    routes see isolated test DBs rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.token_codec = codec
        app.state.account_store = account_store
        app.state.todo_store = todo_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Unit fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET, expire_seconds=3600)


@pytest.fixture
def account_store() -> Generator[AccountStore, None, None]:
    store = AccountStore(db_url=_memory_url("accounts"))
    yield store
    store.close()


@pytest.fixture
def todo_store() -> Generator[TodoStore, None, None]:
    store = TodoStore(db_url=_memory_url("todos"))
    yield store
    store.close()


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, account_id) for an ADMIN account.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use isolated in-memory stores.
    The rate limiter is disabled so repeated signins never hit 429.
    """
    account_store = AccountStore(db_url=_memory_url("test_auth_api"))
    todo_store = TodoStore(db_url=_memory_url("test_todos_api"))
    codec = get_token_codec()

    admin = Account(
        email=ADMIN_EMAIL,
        hashed_password=hash_password(ADMIN_PASSWORD),
        role=AccountRole.ADMIN,
    )
    uid = account_store.create_account(admin)
    token = codec.issue(uid, ADMIN_EMAIL, AccountRole.ADMIN)

    app.router.lifespan_context = _patch_lifespan(account_store, todo_store, codec)
    limiter.enabled = False

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, uid

    limiter.enabled = True
    account_store.close()
    todo_store.close()


@pytest.fixture(scope="module")
def user_auth(api_client) -> tuple[str, int]:
    """Return (token, account_id) for a USER account on the api_client stores."""
    client, _token, _uid = api_client
    store: AccountStore = client.app.state.account_store
    uid = store.create_account(Account(email=USER_EMAIL, hashed_password=hash_password(USER_PASSWORD)))
    token = client.app.state.token_codec.issue(uid, USER_EMAIL, AccountRole.USER)
    return token, uid