"""
Storage abstraction layer for file operations.

This package provides one interface over interchangeable backends:
in-process memory, local filesystem, Google Cloud Storage and
S3-compatible object stores. The cloud backends live in
filestore.storage.gcs and filestore.storage.s3 and are imported on
demand by the factory.
"""

from filestore.storage.base import Driver, StorageBackend
from filestore.storage.exceptions import (
    InvalidPathError,
    ObjectNotFoundError,
    StorageError,
    UnsupportedOperationError,
)
from filestore.storage.factory import create_storage, get_storage
from filestore.storage.local import LocalStorageBackend
from filestore.storage.memory import Entry, MemoryStorageBackend

__all__ = [
    "Driver",
    "StorageBackend",
    "MemoryStorageBackend",
    "Entry",
    "LocalStorageBackend",
    "create_storage",
    "get_storage",
    "StorageError",
    "ObjectNotFoundError",
    "InvalidPathError",
    "UnsupportedOperationError",
]
