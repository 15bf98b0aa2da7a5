"""
Abstract base class for storage backends.

This module defines the interface that all storage backends must implement,
so that callers can swap memory, local disk, GCS and S3 storage without
changing their logic.
"""
from abc import ABC, abstractmethod
from typing import BinaryIO

from filestore.constants import Driver


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    All storage implementations must implement these methods with the same
    observable behavior. Paths are opaque string keys; "/" is the only
    separator and directories exist only by prefix convention.
    """

    @property
    @abstractmethod
    def driver(self) -> Driver:
        """Return the driver of this backend."""
        pass

    @abstractmethod
    async def read(self, path: str) -> BinaryIO:
        """
        Read an object.

        Args:
            path: Key of the object

        Returns:
            Readable byte stream positioned at the start

        Raises:
            ObjectNotFoundError: If the object doesn't exist
        """
        pass

    @abstractmethod
    async def write(self, path: str, contents: bytes) -> None:
        """
        Create or overwrite an object.

        Args:
            path: Key of the object
            contents: Object content, may be empty
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> None:
        """
        Delete an object.

        Raises:
            ObjectNotFoundError: If the object doesn't exist
        """
        pass

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """
        Check if an object exists.

        Absence is never an error; only transport failures raise.
        """
        pass

    @abstractmethod
    async def rename(self, old_path: str, new_path: str) -> None:
        """
        Move an object to a new path.

        Backends without a native move copy then delete. If the delete
        step fails, the object is left at both paths and the delete error
        is raised.

        Raises:
            ObjectNotFoundError: If old_path doesn't exist
        """
        pass

    @abstractmethod
    async def copy(self, source_path: str, destination_path: str) -> None:
        """
        Duplicate an object; the copy is independent of the source.

        Raises:
            ObjectNotFoundError: If source_path doesn't exist
        """
        pass

    @abstractmethod
    async def create_directory(self, path: str) -> None:
        """
        Create a directory if it doesn't already exist.

        Idempotent. Backends without real directories either only validate
        the path or write a zero-byte marker object.

        Raises:
            InvalidPathError: If path is not a valid directory path
        """
        pass

    @abstractmethod
    async def get_url(self, path: str) -> str:
        """
        Get a backend-specific locator for an object.

        The result is not guaranteed to be dereferenceable. Backends that
        validate existence raise ObjectNotFoundError for absent objects.
        """
        pass

    @abstractmethod
    async def open(self, path: str) -> BinaryIO:
        """
        Open an object as a native, locally readable file.

        Cloud backends return a temporary local copy: treat it as a
        snapshot, and close it when done (closing deletes it).

        Raises:
            ObjectNotFoundError: If the object doesn't exist
            UnsupportedOperationError: If the backend has no native files
        """
        pass

    @abstractmethod
    async def upload(self, file: BinaryIO, filename: str, directory: str) -> BinaryIO | None:
        """
        Store a readable stream at directory/filename.

        Args:
            file: Source stream, read to the end
            filename: Name of the stored object inside directory
            directory: Directory prefix ("" for the root)

        Returns:
            The result of open() on the stored object, or None for
            backends without native files
        """
        pass
