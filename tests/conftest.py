"""
tests/conftest.py -- Shared test fixtures for StaffDesk integration tests.

This module provides:
  - make_test_engine(): creates an isolated named shared-memory SQLite engine
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient plus a pre-registered account and its bearer token
  - engine / account_store / reporting_store: per-test in-memory stores

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for the TestClient fixtures because TestClient runs sync route handlers in a
thread pool. Plain :memory: DBs are per-connection and would present a blank
schema to each worker thread. The named URI format
(file:name?mode=memory&cache=shared&uri=true) shares one in-memory instance
across all connections in the same process.

The DEBUG env var must be set before any api/ import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any api/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from api.main import app
from auth.models import Account
from auth.passwords import hash_password
from auth.store import AccountStore
from auth.tokens import TokenService
from core.config import get_settings
from core.database import create_db_engine
from reporting.store import ReportingStore

TEST_USERNAME = "testadmin"
TEST_PASSWORD = "testpass123"


# ---------------------------------------------------------------------------
# Engine helpers
# ---------------------------------------------------------------------------


def make_test_engine(db_suffix: str) -> Engine:
    """Create an isolated named shared-memory SQLite engine.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    return create_db_engine(f"sqlite:///file:test_staffdesk_{db_suffix}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(engine: Engine, token_service: TokenService):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores into app.state so TestClient routes see
    isolated test DBs rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.engine = engine
        app.state.account_store = AccountStore(engine)
        app.state.reporting = ReportingStore(engine)
        app.state.token_service = token_service
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, account_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use an isolated in-memory store.
    An account (TEST_USERNAME / TEST_PASSWORD) is created before the client
    starts and a bearer token is issued for it. Reporting data can be seeded
    through client.app.state.reporting.
    """
    engine = make_test_engine(request.module.__name__.replace(".", "_"))
    token_service = TokenService(get_settings().secret_key, expire_seconds=3600)

    store = AccountStore(engine)
    uid = store.create_account(
        Account(
            username=TEST_USERNAME,
            hashed_password=hash_password(TEST_PASSWORD),
            employee_name="Test Admin",
            position="ops",
        )
    )
    token = token_service.issue(uid, TEST_USERNAME)

    app.router.lifespan_context = _patch_lifespan(engine, token_service)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, uid

    engine.dispose()


# ---------------------------------------------------------------------------
# Function-scoped fixtures -- unit tests against plain in-memory SQLite
# ---------------------------------------------------------------------------


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    eng = create_db_engine("sqlite:///:memory:")
    yield eng
    eng.dispose()


@pytest.fixture
def account_store(engine: Engine) -> AccountStore:
    return AccountStore(engine)


@pytest.fixture
def reporting_store(engine: Engine) -> ReportingStore:
    return ReportingStore(engine)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService("k" * 64, expire_seconds=3600)
