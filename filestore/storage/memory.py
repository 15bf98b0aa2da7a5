"""
In-memory storage implementation.

Objects live in a process-local dictionary. Nothing is persisted and no
native files exist, so open() is unsupported.
"""
from dataclasses import dataclass
from io import BytesIO
from typing import BinaryIO

from filestore.logging_config import setup_logging
from filestore.storage.base import Driver, StorageBackend
from filestore.storage.exceptions import (
    InvalidPathError,
    ObjectNotFoundError,
    UnsupportedOperationError,
)
from filestore.storage.locks import ReadWriteLock
from filestore.utils.paths import is_directory_path, join_path

logger = setup_logging("filestore.memory")


@dataclass
class Entry:
    """An in-memory object."""

    name: str
    content: bytes


class MemoryStorageBackend(StorageBackend):
    """
    Storage backed by a dictionary of entries.

    A single reader/writer lock guards the dictionary: reads run
    concurrently, every mutation (including copy) is exclusive.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}
        self._lock = ReadWriteLock()

    @property
    def driver(self) -> Driver:
        return Driver.MEMORY

    async def read(self, path: str) -> BinaryIO:
        with self._lock.read_locked():
            entry = self._entries.get(path)
            if entry is None:
                raise ObjectNotFoundError(path)
            return BytesIO(entry.content)

    async def write(self, path: str, contents: bytes) -> None:
        with self._lock.write_locked():
            self._entries[path] = Entry(name=path, content=bytes(contents))

    async def delete(self, path: str) -> None:
        with self._lock.write_locked():
            if path not in self._entries:
                raise ObjectNotFoundError(path)
            del self._entries[path]

    async def exists(self, path: str) -> bool:
        with self._lock.read_locked():
            return path in self._entries

    async def rename(self, old_path: str, new_path: str) -> None:
        with self._lock.write_locked():
            entry = self._entries.pop(old_path, None)
            if entry is None:
                raise ObjectNotFoundError(old_path)
            entry.name = new_path
            self._entries[new_path] = entry
        logger.debug(f"Renamed {old_path} to {new_path}")

    async def copy(self, source_path: str, destination_path: str) -> None:
        with self._lock.write_locked():
            source = self._entries.get(source_path)
            if source is None:
                raise ObjectNotFoundError(source_path)
            self._entries[destination_path] = Entry(
                name=destination_path,
                content=source.content,
            )

    async def create_directory(self, path: str) -> None:
        # Directories are simulated by key prefix; only the form is checked
        if not is_directory_path(path):
            raise InvalidPathError(
                f"Directory path must end with '/': {path!r}", path=path
            )

    async def get_url(self, path: str) -> str:
        if not await self.exists(path):
            raise ObjectNotFoundError(path)
        return f"mem://{path}"

    async def open(self, path: str) -> BinaryIO:
        raise UnsupportedOperationError("open", self.driver.value)

    async def upload(self, file: BinaryIO, filename: str, directory: str) -> None:
        """
        Store the stream content at directory/filename.

        Returns None: there is no native file to hand back.
        """
        content = file.read()
        path = join_path(directory, filename)
        with self._lock.write_locked():
            self._entries[path] = Entry(name=path, content=content)
        logger.debug(f"Uploaded {len(content)} bytes to {path}")
