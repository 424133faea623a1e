"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Only one auth method is supported: an Authorization: Bearer <token> header
carrying an access JWT issued by POST /auth/login.

try_get_identity() is the soft variant (returns None on any failure).
authenticate() is the strict variant:
  - no token                -> 401 Unauthorized
  - revoked token           -> 403 Forbidden
  - bad signature / expired -> 403 Forbidden
authorize_roles(*roles) builds a dependency that runs authenticate() and then
raises 403 if the identity's role is not one of `roles`.

On success the decoded Identity is attached to request.state.identity.

Layer rule: no imports from api/ or characters/.
  auth/dependencies.py may import from fastapi (for Depends/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, Request

from auth.models import Identity
from auth.store import TokenStore
from auth.tokens import decode_token
from core.errors import AuthenticationError, AuthorizationError


def get_bearer_token(request: Request) -> str | None:
    """Return the token from an 'Authorization: Bearer <token>' header, or None."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def _identity_from_payload(payload: dict) -> Identity:
    return Identity(id=payload["id"], email=payload.get("email", ""), role=payload.get("role"))


def try_get_identity(request: Request) -> Identity | None:
    """Verify the bearer token if there is one. Never raises.

    Used by POST /auth/logout, which must accept tokens that would fail
    strict authentication (e.g. already revoked) and still log the caller out.
    """
    token = get_bearer_token(request)
    if token is None:
        return None
    token_store: TokenStore = request.app.state.token_store
    if token_store.is_revoked(token):
        return None
    payload = decode_token(token)
    if payload is None:
        return None
    identity = _identity_from_payload(payload)
    request.state.identity = identity
    return identity


def authenticate(request: Request) -> Identity:
    """Require a valid, unrevoked access token.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(identity: Identity = Depends(authenticate)): ...
    """
    token = get_bearer_token(request)
    if token is None:
        raise AuthenticationError()

    token_store: TokenStore = request.app.state.token_store
    if token_store.is_revoked(token):
        raise AuthenticationError("Forbidden", status_code=403)

    payload = decode_token(token)
    if payload is None:
        raise AuthenticationError("Forbidden", status_code=403)

    identity = _identity_from_payload(payload)
    request.state.identity = identity
    return identity


def authorize_roles(*roles: str) -> Callable[..., Identity]:
    """Build a dependency that admits only identities whose role is in `roles`.

    The role set is fixed when the dependency is built (router setup), not
    per request. Authentication runs first through Depends(authenticate);
    this check trusts the identity it attaches.

    Use as a router-level dependency:
        router = APIRouter(dependencies=[Depends(authorize_roles("admin", "user"))])
    """
    allowed = frozenset(roles)

    def check_role(identity: Identity = Depends(authenticate)) -> Identity:
        if not identity.role or identity.role not in allowed:
            raise AuthorizationError()
        return identity

    return check_role
