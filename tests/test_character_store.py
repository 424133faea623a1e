"""Unit tests for characters/store.py -- CharacterStore CRUD semantics.

Covers:
- create assigns a fresh id, get returns the record, delete removes it
- rapid successive creates never collide
- create with an id that already exists is a no-op returning the candidate
- update replaces wholesale, keeps the path id, and misses on unknown ids
- delete on an unknown id returns False and leaves the store untouched
- misses are logged at ERROR
"""

import logging

import pytest

from characters.models import Character
from characters.store import CharacterStore


@pytest.fixture
def store() -> CharacterStore:
    return CharacterStore()


def test_create_get_delete_roundtrip(store):
    created = store.create_character(Character(name="Ann", last_name="Lee"))

    assert created.id is not None
    assert created.name == "Ann"
    assert created.last_name == "Lee"
    assert store.get_character(created.id) == created

    assert store.delete_character(created.id) is True
    assert store.get_character(created.id) is None


def test_create_does_not_mutate_candidate(store):
    candidate = Character(name="Ann", last_name="Lee")
    created = store.create_character(candidate)
    assert candidate.id is None
    assert created is not candidate


def test_rapid_creates_get_unique_ids(store):
    ids = [store.create_character(Character(name=f"Name{i}", last_name="Same")).id for i in range(200)]
    assert len(set(ids)) == 200
    assert len(store) == 200


def test_create_with_existing_id_is_noop(store, caplog):
    existing = store.create_character(Character(name="Ann", last_name="Lee"))
    candidate = Character(name="Bob", last_name="Ray", id=existing.id)

    with caplog.at_level(logging.ERROR, logger="charapi.characters"):
        result = store.create_character(candidate)

    assert result is candidate
    assert len(store) == 1
    assert store.get_character(existing.id).name == "Ann"
    assert "already exists" in caplog.text


def test_create_with_unused_id_assigns_store_id(store):
    created = store.create_character(Character(name="Ann", last_name="Lee", id=4242))
    assert created.id != 4242
    assert store.get_character(created.id) == created
    assert store.get_character(4242) is None


def test_list_preserves_insertion_order(store):
    names = ["Ann", "Bob", "Cyd"]
    for name in names:
        store.create_character(Character(name=name, last_name="Lee"))
    assert [c.name for c in store.list_characters()] == names


def test_list_empty(store):
    assert store.list_characters() == []


def test_update_replaces_wholesale(store):
    created = store.create_character(Character(name="Ann", last_name="Lee"))

    updated = store.update_character(created.id, Character(name="Annie", last_name="Leeson", id=999))

    assert updated.id == created.id
    assert updated.name == "Annie"
    assert store.get_character(created.id).last_name == "Leeson"
    assert store.get_character(999) is None


def test_update_unknown_id_returns_none_and_leaves_store(store, caplog):
    created = store.create_character(Character(name="Ann", last_name="Lee"))

    with caplog.at_level(logging.ERROR, logger="charapi.characters"):
        result = store.update_character(created.id + 100, Character(name="Bob", last_name="Ray"))

    assert result is None
    assert store.list_characters() == [created]
    assert "not found" in caplog.text


def test_delete_unknown_id_returns_false(store):
    created = store.create_character(Character(name="Ann", last_name="Lee"))
    assert store.delete_character(created.id + 100) is False
    assert len(store) == 1
