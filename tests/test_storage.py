"""Tests for the in-memory storage backend."""

from __future__ import annotations

import threading

import pytest

from facenotes.errors import DuplicateIdentityError
from facenotes.storage import MemoryStorage

from .conftest import descriptor


def test_create_and_list_identities(storage: MemoryStorage) -> None:
    alice = storage.create_identity("Alice", descriptor(0.1), profile_image="data:image/png;base64,AA==")
    bob = storage.create_identity("Bob", descriptor(0.2))

    identities = storage.list_identities()

    assert [i.name for i in identities] == ["Alice", "Bob"]
    assert alice.id != bob.id
    assert storage.get_identity(alice.id).profile_image == "data:image/png;base64,AA=="
    assert storage.find_identity_by_name("ALICE").id == alice.id


def test_list_returns_snapshot(storage: MemoryStorage) -> None:
    storage.create_identity("Alice", descriptor())
    snapshot = storage.list_identities()

    storage.create_identity("Bob", descriptor(1.0))

    assert len(snapshot) == 1
    assert len(storage.list_identities()) == 2


def test_duplicate_name_is_rejected_ignoring_case(storage: MemoryStorage) -> None:
    storage.create_identity("Alice", descriptor())

    with pytest.raises(DuplicateIdentityError):
        storage.create_identity("alice", descriptor(1.0))


def test_concurrent_duplicate_registration_keeps_one(storage: MemoryStorage) -> None:
    errors: list[Exception] = []

    def register() -> None:
        try:
            storage.create_identity("Racer", descriptor())
        except DuplicateIdentityError as exc:
            errors.append(exc)

    threads = [threading.Thread(target=register) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(storage.list_identities()) == 1
    assert len(errors) == 7


def test_notes_are_scoped_to_owner(storage: MemoryStorage) -> None:
    first = storage.create_note("1", {"title": "first"})
    second = storage.create_note("1", {"title": "second"})
    storage.create_note("2", {"title": "other user"})

    notes = storage.list_notes("1")

    assert [n.id for n in notes] == [second.id, first.id]
    assert storage.get_note(first.id, "2") is None
    assert storage.update_note(first.id, "2", {"title": "stolen"}) is None
    assert not storage.delete_note(first.id, "2")


def test_update_and_delete_note(storage: MemoryStorage) -> None:
    note = storage.create_note("1", {"title": "draft"})

    updated = storage.update_note(note.id, "1", {"title": "final", "completed": True})

    assert updated.title == "final"
    assert updated.completed
    assert updated.updated_at >= note.updated_at
    assert storage.delete_note(note.id, "1")
    assert storage.get_note(note.id, "1") is None


def test_reset_clears_everything(storage: MemoryStorage) -> None:
    storage.create_identity("Alice", descriptor())
    storage.create_note("1", {"title": "note"})

    storage.reset()

    assert storage.stats() == {"users": 0, "notes": 0}
    assert storage.create_identity("Alice", descriptor()).id == "1"


def test_seed_adds_demo_user(storage: MemoryStorage) -> None:
    storage.seed()

    identities = storage.list_identities()
    assert [i.name for i in identities] == ["Demo User"]
    assert len(identities[0].descriptor) == 128
    assert len(storage.list_notes(identities[0].id)) == 1


def test_timestamps_are_timezone_aware(storage: MemoryStorage) -> None:
    identity = storage.create_identity("Alice", descriptor())
    note = storage.create_note(identity.id, {"title": "note"})
    updated = storage.update_note(note.id, identity.id, {"completed": True})

    assert identity.created_at.tzinfo is not None
    assert note.created_at.tzinfo is not None
    assert updated.updated_at.tzinfo is not None
