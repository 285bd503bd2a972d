"""
Storage package for the ELC Library.

This package provides:
- The key-value table backing a storage area (schema.py)
- Engine and session handling (session.py)
- Storage areas, per-context stores and change events (store.py)
"""

from .schema import Base, StoredRecord
from .session import DatabaseManager, get_db_manager, reset_db_manager
from .store import (
    BOOKS_KEY,
    RECORDS_KEY,
    USER_KEY,
    ChangeListener,
    PersistentStore,
    StorageArea,
    StorageError,
    StorageEvent,
    get_storage_area,
    reset_storage_area,
)

__all__ = [
    "BOOKS_KEY",
    "RECORDS_KEY",
    "USER_KEY",
    "Base",
    "ChangeListener",
    "DatabaseManager",
    "PersistentStore",
    "StorageArea",
    "StorageError",
    "StorageEvent",
    "StoredRecord",
    "get_db_manager",
    "get_storage_area",
    "reset_db_manager",
    "reset_storage_area",
]
