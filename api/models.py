"""
API request and response models for the Character API REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
characters/models.py, which own the internal domain representation. Route
handlers map between the two.

Wire format uses camelCase (lastName, accessToken); Python attributes stay
snake_case. Aliases handle the translation in both directions.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import User
from characters.models import Character

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Deliberately loose: one "@", no whitespace, a dot in the domain part.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class AuthRequest(BaseModel):
    """Request body for POST /auth/register and POST /auth/login.

    max_length=255 on the password keeps inputs well clear of anything
    pathological; bcrypt itself only reads the first 72 bytes.
    """

    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8, max_length=255)


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash or tokens."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email, role=user.role)


class TokenPairResponse(BaseModel):
    """Response body for a successful POST /auth/login."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------


class CharacterIn(BaseModel):
    """Request body for POST /characters and PUT /characters/{id}.

    The same rules apply on create and update, so a stored character always
    has a name and lastName of at least three characters.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    name: str = Field(min_length=3, max_length=100)
    last_name: str = Field(alias="lastName", min_length=3, max_length=100)

    def to_character(self) -> Character:
        return Character(id=self.id, name=self.name, last_name=self.last_name)


class CharacterOut(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[int]
    name: str
    last_name: str = Field(alias="lastName")

    @classmethod
    def from_character(cls, character: Character) -> "CharacterOut":
        return cls(id=character.id, name=character.name, last_name=character.last_name)


# ---------------------------------------------------------------------------
# Generic
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    """{"message": ...} body used by logout, delete and every error response."""

    model_config = ConfigDict(frozen=True)

    message: str
    detail: Optional[list[dict]] = None


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
