"""
Local filesystem storage implementation.

This module provides a local filesystem implementation of the storage backend
with async file operations. Object keys map to files under a base directory,
"/" in a key becoming a directory level.
"""
import os
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

import aiofiles
import aiofiles.os

from filestore.logging_config import setup_logging
from filestore.storage.base import Driver, StorageBackend
from filestore.storage.exceptions import InvalidPathError, ObjectNotFoundError
from filestore.utils.paths import SEPARATOR, join_path

logger = setup_logging("filestore.local")

# Stream files in 64KB chunks
CHUNK_SIZE = 64 * 1024


class LocalStorageBackend(StorageBackend):
    """
    Local filesystem storage with async operations.

    Structure: <base_path>/<key>
    Example: data/storage/docs/a.txt for key "docs/a.txt"

    Keys resolving outside the base directory are rejected.
    """

    def __init__(self, base_path: str):
        """
        Initialize local storage backend.

        Args:
            base_path: Base directory for file storage, created if missing
        """
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    @property
    def driver(self) -> Driver:
        return Driver.LOCAL

    async def read(self, path: str) -> BinaryIO:
        file_path = self._get_file_path(path)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                content = await f.read()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise ObjectNotFoundError(path, cause=e) from e

        return BytesIO(content)

    async def write(self, path: str, contents: bytes) -> None:
        file_path = self._get_file_path(path)
        self._ensure_directory_exists(file_path)

        async with aiofiles.open(file_path, "wb") as f:
            await f.write(contents)

    async def delete(self, path: str) -> None:
        file_path = self._get_file_path(path)
        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError as e:
            raise ObjectNotFoundError(path, cause=e) from e
        logger.debug(f"Deleted {file_path}")

    async def exists(self, path: str) -> bool:
        file_path = self._get_file_path(path)
        return await aiofiles.os.path.isfile(file_path)

    async def rename(self, old_path: str, new_path: str) -> None:
        """
        Move a file with os.replace, atomic on one filesystem.

        An existing destination is overwritten.
        """
        source = self._get_file_path(old_path)
        destination = self._get_file_path(new_path)

        if not await aiofiles.os.path.isfile(source):
            raise ObjectNotFoundError(old_path)

        self._ensure_directory_exists(destination)
        try:
            await aiofiles.os.replace(source, destination)
        except FileNotFoundError as e:
            raise ObjectNotFoundError(old_path, cause=e) from e
        logger.debug(f"Renamed {source} to {destination}")

    async def copy(self, source_path: str, destination_path: str) -> None:
        source = self._get_file_path(source_path)
        destination = self._get_file_path(destination_path)

        if not await aiofiles.os.path.isfile(source):
            raise ObjectNotFoundError(source_path)
        if source == destination:
            return

        self._ensure_directory_exists(destination)
        async with aiofiles.open(source, "rb") as src, aiofiles.open(destination, "wb") as dst:
            while chunk := await src.read(CHUNK_SIZE):
                await dst.write(chunk)

    async def create_directory(self, path: str) -> None:
        """
        Create a directory (and its parents) under the base directory.

        Accepts the path with or without a trailing "/". Idempotent.
        """
        directory = self._get_file_path(path)
        await aiofiles.os.makedirs(directory, exist_ok=True)

    async def get_url(self, path: str) -> str:
        """Return a file:// URI for an existing file."""
        file_path = self._get_file_path(path)
        if not await aiofiles.os.path.isfile(file_path):
            raise ObjectNotFoundError(path)
        return file_path.as_uri()

    async def open(self, path: str) -> BinaryIO:
        """
        Open the stored file itself for reading.

        The caller owns the returned handle and must close it.
        """
        file_path = self._get_file_path(path)
        try:
            return file_path.open("rb")
        except (FileNotFoundError, IsADirectoryError) as e:
            raise ObjectNotFoundError(path, cause=e) from e

    async def upload(self, file: BinaryIO, filename: str, directory: str) -> BinaryIO:
        """
        Stream a file to disk in chunks, then open it.

        A partially written file is removed if reading the source or
        writing to disk fails, and the original error is raised.
        """
        path = join_path(directory, filename)
        file_path = self._get_file_path(path)
        self._ensure_directory_exists(file_path)

        total_size = 0
        try:
            async with aiofiles.open(file_path, "wb") as f:
                while chunk := file.read(CHUNK_SIZE):
                    total_size += len(chunk)
                    await f.write(chunk)
        except Exception:
            # Clean up partial file on error
            if os.path.exists(file_path):
                os.remove(file_path)
            raise

        logger.debug(f"Uploaded {total_size} bytes to {file_path}")
        return await self.open(path)

    def _get_file_path(self, path: str) -> Path:
        """
        Calculate the file path for a key.

        Args:
            path: Object key, "/" separated

        Returns:
            Absolute file path inside the base directory

        Raises:
            InvalidPathError: If the key is empty or escapes the base directory
        """
        if not path.strip(SEPARATOR):
            raise InvalidPathError(f"Invalid path: {path!r}", path=path)

        file_path = (self.base_path / path.lstrip(SEPARATOR)).resolve()
        if not file_path.is_relative_to(self.base_path):
            raise InvalidPathError(f"Path escapes storage root: {path!r}", path=path)
        return file_path

    def _ensure_directory_exists(self, file_path: Path) -> None:
        """
        Ensure the parent directory exists.

        Args:
            file_path: File path that needs parent directory
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)
