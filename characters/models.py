"""
characters/models.py -- Domain dataclass for the character resource.

Pure data container with zero logic. Name-length rules are an API contract
and live in api/models.py; CharacterStore stores whatever it is given.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Character:
    """A named character.

    id is None for a candidate that has not been stored yet; CharacterStore
    assigns one on create.
    """

    name: str
    last_name: str
    id: Optional[int] = None
