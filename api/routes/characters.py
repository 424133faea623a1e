"""
api/routes/characters.py -- CRUD endpoints for the character resource.

Routes:
  GET    /characters        -- list all characters (insertion order)
  POST   /characters        -- create; 201, or 200 if the candidate id is taken
  GET    /characters/{id}   -- detail; 404 if unknown
  PUT    /characters/{id}   -- replace wholesale; 404 if unknown
  DELETE /characters/{id}   -- remove; 404 if unknown

Handlers are async so they run on the event loop: CharacterStore calls are
plain dict operations and never interleave with each other.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import CharacterIn, CharacterOut, MessageResponse
from auth.dependencies import authorize_roles
from characters.store import CharacterStore
from core.config import get_settings
from core.errors import NotFoundError

# Auth policy: every route requires a valid access token whose role is one of
# Settings.character_roles. The router-level dependency runs authenticate()
# then the role check, so handlers don't repeat it.
router = APIRouter(
    prefix="/characters",
    dependencies=[Depends(authorize_roles(*get_settings().character_roles))],
)

_NOT_FOUND = "Character not found"


def _store(request: Request) -> CharacterStore:
    return request.app.state.character_store


@router.get("", response_model=list[CharacterOut])
async def list_characters(request: Request) -> list[CharacterOut]:
    return [CharacterOut.from_character(c) for c in _store(request).list_characters()]


@router.post("", response_model=CharacterOut, status_code=201)
async def create_character(request: Request, body: CharacterIn) -> JSONResponse:
    """Create a character.

    The store returns the candidate itself when its id is already taken; in
    that case nothing was created and the response is 200 instead of 201.

    FastAPI parses the JSON body before running the router dependencies, so
    a malformed body answers 400 even when the token is missing.
    """
    candidate = body.to_character()
    result = _store(request).create_character(candidate)
    status_code = 200 if result is candidate else 201
    return JSONResponse(
        status_code=status_code,
        content=CharacterOut.from_character(result).model_dump(by_alias=True),
    )


@router.get("/{character_id}", response_model=CharacterOut)
async def get_character(request: Request, character_id: int) -> CharacterOut:
    character = _store(request).get_character(character_id)
    if character is None:
        raise NotFoundError(_NOT_FOUND)
    return CharacterOut.from_character(character)


@router.put("/{character_id}", response_model=CharacterOut)
async def update_character(request: Request, character_id: int, body: CharacterIn) -> CharacterOut:
    """Replace a character. Name rules are re-checked by CharacterIn."""
    updated = _store(request).update_character(character_id, body.to_character())
    if updated is None:
        raise NotFoundError(_NOT_FOUND)
    return CharacterOut.from_character(updated)


@router.delete("/{character_id}", response_model=MessageResponse, response_model_exclude_none=True)
async def delete_character(request: Request, character_id: int) -> MessageResponse:
    if not _store(request).delete_character(character_id):
        raise NotFoundError(_NOT_FOUND)
    return MessageResponse(message="Character deleted")
