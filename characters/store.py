"""
characters/store.py -- In-memory repository for Character records.

Pattern: Repository (same shape as auth/store.py). CharacterStore owns an
id -> Character dict; routes call its methods and never touch the dict.

Ids come from a counter owned by the store, so two creates in quick
succession can never collide. Dicts preserve insertion order, which is the
order list_characters() returns.

Lookups that miss are logged at ERROR and reported through the return value
(None / False) rather than raised; the route layer decides the HTTP status.

Usage:
    store = CharacterStore()
    ann = store.create_character(Character(name="Ann", last_name="Lee"))
    store.get_character(ann.id)
    store.delete_character(ann.id)
"""

import itertools
import logging
from dataclasses import replace
from typing import Optional

from characters.models import Character

logger = logging.getLogger("charapi.characters")


class CharacterStore:
    def __init__(self) -> None:
        self._characters: dict[int, Character] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._characters)

    def list_characters(self) -> list[Character]:
        """Return all characters in insertion order."""
        return list(self._characters.values())

    def get_character(self, character_id: int) -> Optional[Character]:
        return self._characters.get(character_id)

    def create_character(self, candidate: Character) -> Character:
        """Store a new character and return it with its assigned id.

        No-op on conflict: if candidate.id is set and already taken, the error
        is logged and the candidate is returned unchanged -- the caller can
        tell nothing was created because it gets back the very same object.
        A candidate id that is set but free is ignored; the store always
        assigns its own id.
        """
        if candidate.id is not None and candidate.id in self._characters:
            logger.error("Character with id %s already exists", candidate.id)
            return candidate

        created = replace(candidate, id=next(self._ids))
        self._characters[created.id] = created
        return created

    def update_character(self, character_id: int, data: Character) -> Optional[Character]:
        """Replace the stored record wholesale. Returns None if the id is unknown.

        Fields are not merged; the stored record keeps character_id whatever
        data.id says.
        """
        if character_id not in self._characters:
            logger.error("Character with id %s not found", character_id)
            return None

        updated = replace(data, id=character_id)
        self._characters[character_id] = updated
        return updated

    def delete_character(self, character_id: int) -> bool:
        if character_id not in self._characters:
            logger.error("Character with id %s not found", character_id)
            return False

        del self._characters[character_id]
        return True
