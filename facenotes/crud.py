# facenotes/crud.py
import logging
from typing import List, Optional

from .config import FACE_MATCH_THRESHOLD, RETRY_SUGGESTION_DISTANCE
from .errors import NoMatchError, NotFoundError
from .face_utils import (
    MatchResult,
    match_descriptor,
    validate_query_descriptor,
    validate_registration,
)
from .models.identity_model import EnrolledIdentity
from .models.note_model import Note
from .schemas import NoteCreate, NoteUpdate
from .storage import Storage

logger = logging.getLogger(__name__)


# Register a new user with a face descriptor
def register_user(
    storage: Storage, name: Optional[str], descriptor, profile_image: Optional[str] = None
) -> EnrolledIdentity:
    existing = [identity.name for identity in storage.list_identities()]
    name, clean = validate_registration(name, descriptor, existing)
    # storage re-checks the name atomically in case of a concurrent registration
    identity = storage.create_identity(name, clean, profile_image)
    logger.info(f"Registered user {identity.name} ({identity.id})")
    return identity


# Match a login descriptor against every enrolled user
def authenticate_user(
    storage: Storage, descriptor, threshold: float = FACE_MATCH_THRESHOLD
) -> MatchResult:
    query = validate_query_descriptor(descriptor)
    identities = storage.list_identities()
    logger.info(f"Found {len(identities)} registered users for comparison")
    if not identities:
        raise NotFoundError("No registered users found. Please register first.")

    result = match_descriptor(query, identities, threshold)
    if not result.accepted:
        logger.info(f"Authentication failed. Best distance: {result.distance:.4f}")
        suggestion = (
            "Try again with better lighting"
            if result.distance < RETRY_SUGGESTION_DISTANCE
            else "Please register first"
        )
        raise NoMatchError(
            f"No matching user found. Best match distance: {result.distance:.4f}",
            best_distance=result.distance,
            suggestion=suggestion,
        )

    logger.info(f"Authentication successful for user: {result.identity.name}")
    return result


def get_user(storage: Storage, user_id: str) -> EnrolledIdentity:
    identity = storage.get_identity(user_id)
    if identity is None:
        raise NotFoundError("User not found")
    return identity


def list_notes(storage: Storage, user_id: str) -> List[Note]:
    return storage.list_notes(user_id)


def get_note(storage: Storage, user_id: str, note_id: str) -> Note:
    note = storage.get_note(note_id, user_id)
    if note is None:
        raise NotFoundError("Note not found")
    return note


def create_note(storage: Storage, user_id: str, data: NoteCreate) -> Note:
    note = storage.create_note(
        user_id,
        {
            "title": data.title,
            "content": data.content,
            "priority": data.priority,
            "completed": data.completed,
            "due_date": data.dueDate,
        },
    )
    logger.info(f"Note {note.id} created for user {user_id}")
    return note


def update_note(storage: Storage, user_id: str, note_id: str, data: NoteUpdate) -> Note:
    sent = data.model_dump(exclude_unset=True)
    changes = {}
    for field, key in (
        ("title", "title"),
        ("content", "content"),
        ("priority", "priority"),
        ("completed", "completed"),
    ):
        # explicit nulls are ignored for required fields
        if sent.get(field) is not None:
            changes[key] = sent[field]
    if "dueDate" in sent:
        changes["due_date"] = sent["dueDate"]

    note = storage.update_note(note_id, user_id, changes)
    if note is None:
        raise NotFoundError("Note not found")
    return note


def delete_note(storage: Storage, user_id: str, note_id: str) -> None:
    if not storage.delete_note(note_id, user_id):
        raise NotFoundError("Note not found")
    logger.info(f"Note {note_id} deleted for user {user_id}")
