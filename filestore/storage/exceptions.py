"""
Storage-specific exceptions.

Every backend raises the same exception types for the same conditions,
so callers can branch on them without knowing which backend is in use.
Transport errors from the underlying medium (OSError, cloud SDK errors)
are not wrapped and reach the caller unchanged.
"""


class StorageError(Exception):
    """Base exception for storage operations."""

    def __init__(self, message: str, path: str | None = None, cause: Exception | None = None):
        self.path = path
        self.cause = cause
        super().__init__(message)


class ObjectNotFoundError(StorageError):
    """Raised when the requested object does not exist."""

    def __init__(self, path: str, cause: Exception | None = None):
        super().__init__(f"Object not found: {path}", path=path, cause=cause)


class InvalidPathError(StorageError):
    """Raised when a path is malformed for the requested operation."""


class UnsupportedOperationError(StorageError):
    """Raised when a backend structurally cannot perform an operation."""

    def __init__(self, operation: str, driver: str):
        self.operation = operation
        self.driver = driver
        super().__init__(f"{operation} is not supported for {driver} storage")
