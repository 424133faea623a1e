"""
auth/store.py -- In-memory repositories for auth entities.

Pattern: Repository. UserStore owns User records, TokenStore owns the set of
revoked bearer tokens. Route and dependency code never touches the underlying
dict/set directly.

Both stores are plain objects created once by the application lifespan and
shared through app.state. Nothing is persisted; state lives as long as the
process.

Concurrency: FastAPI runs the bcrypt-bound auth handlers in its thread pool,
so UserStore serialises check-and-insert with a lock. TokenStore only does
single set operations.

Layer rule: no imports from api/ or characters/.
"""

from __future__ import annotations

import itertools
import logging
import threading

from auth.models import User
from auth.tokens import hash_password, verify_password
from core.config import get_settings
from core.errors import ConflictError

logger = logging.getLogger("charapi.auth")


class UserStore:
    """Repository for User entities, keyed by email.

    Usage:
        store = UserStore()
        user = store.create_user("ann@example.com", "s3cret-pass")
        store.get_by_email("ann@example.com")
    """

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._users)

    def create_user(self, email: str, password: str, role: str | None = None) -> User:
        """Hash the password and store a new user.

        Raises ConflictError if the email is already registered. The hash is
        computed before taking the lock so concurrent registrations do not
        queue behind bcrypt.
        """
        hashed = hash_password(password)
        with self._lock:
            if email in self._users:
                raise ConflictError(f"User with email {email} already exists")
            user = User(
                id=next(self._ids),
                email=email,
                hashed_password=hashed,
                role=role or get_settings().default_role,
            )
            self._users[email] = user
        logger.info("Registered user id=%d role=%s", user.id, user.role)
        return user

    def get_by_email(self, email: str) -> User | None:
        return self._users.get(email)

    def get_by_id(self, user_id: int) -> User | None:
        for user in self._users.values():
            if user.id == user_id:
                return user
        return None

    def set_refresh_token(self, email: str, token: str | None) -> bool:
        """Store (or clear, with None) the user's refresh token.

        Returns False if no user has that email.
        """
        user = self._users.get(email)
        if user is None:
            logger.error("Cannot set refresh token: no user with email %s", email)
            return False
        user.refresh_token = token
        return True

    def validate_password(self, user: User, plaintext: str) -> bool:
        return verify_password(plaintext, user.hashed_password)


class TokenStore:
    """Set of revoked bearer tokens.

    Entries are never removed: a revoked token stays rejected even after its
    natural expiry, and the set grows for the life of the process.
    """

    def __init__(self) -> None:
        self._revoked: set[str] = set()

    def __len__(self) -> int:
        return len(self._revoked)

    def revoke(self, token: str) -> None:
        """Mark a token as permanently unusable. Idempotent."""
        self._revoked.add(token)

    def is_revoked(self, token: str) -> bool:
        return token in self._revoked
