# facenotes/storage_mongo.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, MongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError

from .config import MONGO_DB, MONGO_URI, NOTES_COLLECTION_NAME, USERS_COLLECTION_NAME
from .errors import DuplicateIdentityError
from .models.identity_model import EnrolledIdentity
from .models.note_model import Note
from .storage import Storage

logger = logging.getLogger(__name__)


def _object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _to_identity(doc: Dict[str, Any]) -> EnrolledIdentity:
    return EnrolledIdentity(
        id=str(doc["_id"]),
        name=doc["name"],
        descriptor=doc.get("faceDescriptor") or [],
        profile_image=doc.get("profileImage"),
        created_at=doc.get("createdAt") or datetime.now(timezone.utc),
    )


def _to_note(doc: Dict[str, Any]) -> Note:
    return Note(
        id=str(doc["_id"]),
        user_id=doc["userId"],
        title=doc["title"],
        content=doc.get("content", ""),
        priority=doc.get("priority", "medium"),
        completed=doc.get("completed", False),
        due_date=doc.get("dueDate"),
        created_at=doc.get("createdAt") or datetime.now(timezone.utc),
        updated_at=doc.get("updatedAt") or datetime.now(timezone.utc),
    )


# Note model field -> document field
_NOTE_FIELDS = {
    "title": "title",
    "content": "content",
    "priority": "priority",
    "completed": "completed",
    "due_date": "dueDate",
}


def _note_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    doc = {}
    for key, value in data.items():
        if key not in _NOTE_FIELDS:
            continue
        if key == "priority" and value is not None:
            value = getattr(value, "value", value)
        doc[_NOTE_FIELDS[key]] = value
    return doc


class MongoStorage(Storage):
    name = "MongoDB"

    def __init__(self, uri: str = MONGO_URI, db_name: str = MONGO_DB, client: MongoClient = None):
        """Initialize MongoDB connection"""
        try:
            self.client = client or MongoClient(uri, serverSelectionTimeoutMS=10000, tz_aware=True)
            self.db = self.client[db_name]
            self.users = self.db[USERS_COLLECTION_NAME]
            self.notes = self.db[NOTES_COLLECTION_NAME]

            # Case-insensitive uniqueness is enforced on a lower-cased copy of the name
            self.users.create_index("nameLower", unique=True)
            self.notes.create_index([("userId", 1), ("createdAt", DESCENDING)])

            # Test connection
            self.client.server_info()
            logger.info(f"Connected to MongoDB database: {db_name}")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    # --- Identities ---
    def list_identities(self) -> List[EnrolledIdentity]:
        cursor = self.users.find({})
        identities = [_to_identity(doc) for doc in cursor]
        logger.info(f"Retrieved {len(identities)} users")
        return identities

    def create_identity(self, name, descriptor, profile_image=None) -> EnrolledIdentity:
        now = datetime.now(timezone.utc)
        doc = {
            "name": name,
            "nameLower": name.lower(),
            "faceDescriptor": [float(v) for v in descriptor],
            "profileImage": profile_image,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = self.users.insert_one(doc)
        except DuplicateKeyError:
            logger.warning(f"User {name} already exists")
            raise DuplicateIdentityError("User with this name already exists")
        doc["_id"] = result.inserted_id
        logger.info(f"User {name} saved with id {result.inserted_id}")
        return _to_identity(doc)

    def get_identity(self, identity_id: str) -> Optional[EnrolledIdentity]:
        oid = _object_id(identity_id)
        if oid is None:
            return None
        doc = self.users.find_one({"_id": oid})
        return _to_identity(doc) if doc else None

    def find_identity_by_name(self, name: str) -> Optional[EnrolledIdentity]:
        doc = self.users.find_one({"nameLower": name.lower()})
        return _to_identity(doc) if doc else None

    # --- Notes ---
    def create_note(self, user_id: str, data: Dict[str, Any]) -> Note:
        now = datetime.now(timezone.utc)
        doc = {
            "content": "",
            "priority": "medium",
            "completed": False,
            "dueDate": None,
            **_note_fields(data),
            "userId": str(user_id),
            "createdAt": now,
            "updatedAt": now,
        }
        result = self.notes.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _to_note(doc)

    def list_notes(self, user_id: str) -> List[Note]:
        cursor = self.notes.find({"userId": str(user_id)}).sort("createdAt", DESCENDING)
        return [_to_note(doc) for doc in cursor]

    def get_note(self, note_id: str, user_id: str) -> Optional[Note]:
        oid = _object_id(note_id)
        if oid is None:
            return None
        doc = self.notes.find_one({"_id": oid, "userId": str(user_id)})
        return _to_note(doc) if doc else None

    def update_note(self, note_id, user_id, changes) -> Optional[Note]:
        oid = _object_id(note_id)
        if oid is None:
            return None
        update = {**_note_fields(changes), "updatedAt": datetime.now(timezone.utc)}
        doc = self.notes.find_one_and_update(
            {"_id": oid, "userId": str(user_id)},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        return _to_note(doc) if doc else None

    def delete_note(self, note_id, user_id) -> bool:
        oid = _object_id(note_id)
        if oid is None:
            return False
        result = self.notes.delete_one({"_id": oid, "userId": str(user_id)})
        return result.deleted_count > 0

    # --- Utility ---
    def stats(self) -> Dict[str, Any]:
        return {
            "users": self.users.count_documents({}),
            "notes": self.notes.count_documents({}),
        }

    def reset(self) -> None:
        self.users.delete_many({})
        self.notes.delete_many({})
        logger.info("MongoDB collections cleared")

    def close(self):
        """Close MongoDB connection"""
        self.client.close()
        logger.info("MongoDB connection closed")
