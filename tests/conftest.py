"""
tests/conftest.py -- Shared test fixtures for Character API tests.

This module provides:
  - _make_test_stores(): fresh in-memory stores, one set per test module
  - _patch_lifespan(): wires those stores into app.state, bypassing real startup
  - api_client: TestClient plus an admin access token for integration tests
  - token_for(): helper that registers a user with a given role and returns a token

The DEBUG env var must be set before any app import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
LOGIN_RATE_LIMIT is raised so the many logins in the suite never hit 429.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set env before any api/auth/core import -- settings are read once.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import TokenStore, UserStore
from auth.tokens import create_access_token
from characters.store import CharacterStore

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "adminpass123"

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores() -> tuple[TokenStore, UserStore, CharacterStore]:
    return TokenStore(), UserStore(), CharacterStore()


def _patch_lifespan(token_store: TokenStore, user_store: UserStore, character_store: CharacterStore):
    """Return an async context manager that replaces the real lifespan.

    Lets tests hold references to the exact store objects the routes use,
    so they can seed data and assert on store state directly.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.token_store = token_store
        app.state.user_store = user_store
        app.state.character_store = character_store
        yield

    return test_lifespan


def token_for(user_store: UserStore, email: str, role: str, password: str = "password123") -> str:
    """Register a user with `role` directly in the store and return an access token."""
    user = user_store.create_user(email, password, role=role)
    return create_access_token(user.id, user.email, user.role)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str], None, None]:
    """Yield (client, admin_token) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use stores private to the module.
    Stores are reachable as client.app.state.<name>_store.
    """
    token_store, user_store, character_store = _make_test_stores()
    admin_token = token_for(user_store, ADMIN_EMAIL, "admin", password=ADMIN_PASSWORD)

    app.router.lifespan_context = _patch_lifespan(token_store, user_store, character_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, admin_token
