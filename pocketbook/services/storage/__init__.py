"""
Storage Services Package

Provides the abstract storage interface and its SQLite implementation.
Services depend on the interface only, so the backend stays swappable.
"""

from pocketbook.services.storage.interface import (
    DuplicateError,
    NotFoundError,
    SnapshotStoreInterface,
    StorageError,
    StorageNotInitializedError,
)
from pocketbook.services.storage.sqlite import SQLiteSnapshotStore

__all__ = [
    # Interface
    "SnapshotStoreInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    "StorageNotInitializedError",
    # SQLite implementation
    "SQLiteSnapshotStore",
]
