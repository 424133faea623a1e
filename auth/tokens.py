"""
auth/tokens.py -- JWT signing/verification and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Access tokens carry id, email, role, type and
       expiry; refresh tokens carry only id, type and expiry. Every token gets
       a random jti so two tokens issued in the same second are still
       distinct strings (revoking one never revokes the other). Verification
       returns None on any failure -- the auth dependency turns that into 403.

  Passwords: bcrypt directly. The _DUMMY_HASH constant enables timing
       equalization in authenticate_user() so response time does not reveal
       whether an email is registered.

  SECRET_KEY: sourced from core.config.get_settings(), which validates it
       at startup (dev mode auto-generates, production requires >= 32 chars).

Layer rule: no imports from api/ or characters/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from core.config import get_settings

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("charapi.auth")

_settings = get_settings()

_ALGORITHM = "HS256"

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt only looks at the first 72 bytes. The API layer caps passwords at
    255 characters; see api/models.py.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


# Computed once at module load so the first failed login is not measurably
# slower than later ones.
_DUMMY_HASH: str = hash_password("charapi_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def _encode(claims: dict, expire_seconds: int) -> str:
    payload = dict(claims)
    payload["jti"] = uuid.uuid4().hex
    payload["exp"] = datetime.now(timezone.utc) + timedelta(seconds=expire_seconds)
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def create_access_token(user_id: int, email: str, role: str, expire_seconds: int = 0) -> str:
    """Encode a short-lived signed JWT carrying the caller's identity.

    Args:
        user_id:        Numeric user ID from UserStore.
        email:          The user's email (the UserStore key).
        role:           The user's role, checked by authorize_roles().
        expire_seconds: Lifetime in seconds. 0 (default) uses
                        Settings.access_token_expire_seconds.
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.access_token_expire_seconds
    claims = {"id": user_id, "email": email, "role": role, "type": ACCESS_TOKEN_TYPE}
    return _encode(claims, duration)


def create_refresh_token(user_id: int, expire_seconds: int = 0) -> str:
    """Encode a longer-lived JWT that only identifies the user."""
    duration = expire_seconds if expire_seconds > 0 else _settings.refresh_token_expire_seconds
    return _encode({"id": user_id, "type": REFRESH_TOKEN_TYPE}, duration)


def decode_token(token: str, token_type: str = ACCESS_TOKEN_TYPE) -> dict | None:
    """Decode and verify a JWT. Returns the payload dict or None on any failure.

    Failure covers bad signature, expiry, malformed token, and a token of the
    wrong type (a refresh token presented where an access token is expected).
    """
    try:
        payload = jwt.decode(token, _settings.secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        logger.debug("Token rejected: %s", exc)
        return None
    if payload.get("type") != token_type or "id" not in payload:
        return None
    return payload


# ---------------------------------------------------------------------------
# User authentication (constant-time)
# ---------------------------------------------------------------------------


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Check an email/password pair with timing equalization.

    Always runs bcrypt whether or not the email is registered:
    - Unknown email: bcrypt runs against _DUMMY_HASH
    - Wrong password: bcrypt runs against the real hash

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not store.validate_password(user, password):
        return None
    return user
