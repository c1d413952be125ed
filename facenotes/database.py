# facenotes/database.py
import logging

from fastapi import Request

from .config import SEED_DEMO_DATA, STORAGE_BACKEND
from .storage import MemoryStorage, Storage

logger = logging.getLogger(__name__)


def build_storage(backend: str = STORAGE_BACKEND, seed: bool = SEED_DEMO_DATA) -> Storage:
    """Create the storage backend chosen by configuration. Called once at startup."""
    if backend == "mongo":
        # imported lazily so the memory backend works without a reachable server
        from .storage_mongo import MongoStorage

        return MongoStorage()
    if backend != "memory":
        raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected 'memory' or 'mongo'")

    storage = MemoryStorage()
    if seed:
        storage.seed()
    logger.info("Using in-memory mock database")
    return storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage
