"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors
characters/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/ or characters/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account, keyed by email in UserStore.

    hashed_password is a bcrypt hash; the plaintext is never kept.
    refresh_token holds the most recently issued refresh JWT and is cleared
    on logout.
    """

    email: str
    hashed_password: str
    role: str  # "admin", "user", ...
    id: int | None = None
    refresh_token: str | None = None


@dataclass(frozen=True)
class Identity:
    """Decoded access-token payload attached to a single request.

    Lives on request.state.identity for the duration of one request and is
    never stored.
    """

    id: int
    email: str
    role: str | None = None
