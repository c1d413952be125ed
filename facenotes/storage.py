# facenotes/storage.py
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .config import DESCRIPTOR_DIM
from .errors import DuplicateIdentityError
from .models.identity_model import EnrolledIdentity
from .models.note_model import Note

logger = logging.getLogger(__name__)


class Storage(ABC):
    """
    Persistence interface shared by the in-memory and MongoDB backends.
    One instance is created at startup and handed to the route handlers.
    """

    name = "storage"

    # --- Identities ---
    @abstractmethod
    def list_identities(self) -> List[EnrolledIdentity]:
        ...

    @abstractmethod
    def create_identity(
        self, name: str, descriptor: Sequence[float], profile_image: Optional[str] = None
    ) -> EnrolledIdentity:
        """Raises DuplicateIdentityError if the name exists, ignoring case."""

    @abstractmethod
    def get_identity(self, identity_id: str) -> Optional[EnrolledIdentity]:
        ...

    @abstractmethod
    def find_identity_by_name(self, name: str) -> Optional[EnrolledIdentity]:
        ...

    # --- Notes ---
    @abstractmethod
    def create_note(self, user_id: str, data: Dict[str, Any]) -> Note:
        ...

    @abstractmethod
    def list_notes(self, user_id: str) -> List[Note]:
        """Notes owned by ``user_id``, newest first."""

    @abstractmethod
    def get_note(self, note_id: str, user_id: str) -> Optional[Note]:
        ...

    @abstractmethod
    def update_note(self, note_id: str, user_id: str, changes: Dict[str, Any]) -> Optional[Note]:
        ...

    @abstractmethod
    def delete_note(self, note_id: str, user_id: str) -> bool:
        ...

    # --- Utility ---
    @abstractmethod
    def stats(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def reset(self) -> None:
        """Drop all users and notes. Meant for tests and local development."""

    def close(self) -> None:
        pass


class MemoryStorage(Storage):
    """
    In-process store used for development and tests.
    Writes are serialized with a lock and readers get snapshot copies, so a
    registration in progress is never visible half-written to a matcher.
    """

    name = "Mock Database"

    def __init__(self):
        self._lock = threading.Lock()
        self._identities: List[EnrolledIdentity] = []
        self._notes: Dict[str, Note] = {}
        self._next_user_id = 1
        self._next_note_id = 1

    def list_identities(self) -> List[EnrolledIdentity]:
        with self._lock:
            return list(self._identities)

    def create_identity(self, name, descriptor, profile_image=None) -> EnrolledIdentity:
        with self._lock:
            folded = name.lower()
            if any(i.name.lower() == folded for i in self._identities):
                raise DuplicateIdentityError("User with this name already exists")
            identity = EnrolledIdentity(
                id=str(self._next_user_id),
                name=name,
                descriptor=list(descriptor),
                profile_image=profile_image,
            )
            self._next_user_id += 1
            self._identities.append(identity)
        logger.info(f"User {identity.name} saved with id {identity.id}")
        return identity

    def get_identity(self, identity_id: str) -> Optional[EnrolledIdentity]:
        with self._lock:
            return next((i for i in self._identities if i.id == str(identity_id)), None)

    def find_identity_by_name(self, name: str) -> Optional[EnrolledIdentity]:
        folded = name.lower()
        with self._lock:
            return next((i for i in self._identities if i.name.lower() == folded), None)

    def create_note(self, user_id: str, data: Dict[str, Any]) -> Note:
        with self._lock:
            note = Note(id=str(self._next_note_id), user_id=str(user_id), **data)
            self._next_note_id += 1
            self._notes[note.id] = note
        return note

    def list_notes(self, user_id: str) -> List[Note]:
        with self._lock:
            notes = [n for n in self._notes.values() if n.user_id == str(user_id)]
        # ids increase with insertion, which breaks created_at ties
        return sorted(notes, key=lambda n: (n.created_at, int(n.id)), reverse=True)

    def get_note(self, note_id: str, user_id: str) -> Optional[Note]:
        with self._lock:
            note = self._notes.get(str(note_id))
        if note is None or note.user_id != str(user_id):
            return None
        return note

    def update_note(self, note_id, user_id, changes) -> Optional[Note]:
        with self._lock:
            note = self._notes.get(str(note_id))
            if note is None or note.user_id != str(user_id):
                return None
            updated = note.model_copy(update={**changes, "updated_at": datetime.now(timezone.utc)})
            self._notes[note.id] = updated
        return updated

    def delete_note(self, note_id, user_id) -> bool:
        with self._lock:
            note = self._notes.get(str(note_id))
            if note is None or note.user_id != str(user_id):
                return False
            del self._notes[note.id]
        return True

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {"users": len(self._identities), "notes": len(self._notes)}

    def reset(self) -> None:
        with self._lock:
            self._identities = []
            self._notes = {}
            self._next_user_id = 1
            self._next_note_id = 1
        logger.info("Mock database cleared")

    def seed(self) -> None:
        """Add a demo user with a random descriptor and a welcome note."""
        demo = self.create_identity(
            "Demo User", np.random.default_rng().random(DESCRIPTOR_DIM).tolist()
        )
        self.create_note(
            demo.id,
            {
                "title": "Welcome to Facial Recognition Todo!",
                "content": "This is a demo note. You can create, edit, and delete notes "
                "after logging in with face recognition.",
            },
        )
        logger.info("Mock database seeded with sample data")
