"""
Google Cloud Storage implementation.

Each operation is a thin translation to the google-cloud-storage client.
The client is blocking, so calls run in a worker thread. Only "object
absent" is translated (to ObjectNotFoundError); every other error from
google.api_core reaches the caller unchanged.
"""
import asyncio
import tempfile
from io import BytesIO
from typing import BinaryIO

from google.api_core.exceptions import NotFound, PreconditionFailed
from google.cloud import storage as gcs
from google.oauth2 import service_account

from filestore.logging_config import setup_logging
from filestore.storage.base import Driver, StorageBackend
from filestore.storage.exceptions import InvalidPathError, ObjectNotFoundError
from filestore.utils.paths import SEPARATOR, directory_marker, join_path

logger = setup_logging("filestore.gcs")


class GCSStorageBackend(StorageBackend):
    """
    Storage backed by a single GCS bucket.

    rename() is copy then delete and is not atomic. open() and upload()
    hand back a temporary local copy that is deleted when closed.
    """

    def __init__(
        self,
        bucket_name: str,
        project: str | None = None,
        credentials_path: str | None = None,
        client: gcs.Client | None = None,
    ):
        """
        Initialize GCS storage backend.

        Args:
            bucket_name: GCS bucket name
            project: GCP project (optional, inferred from credentials if not set)
            credentials_path: Service account key file (optional, uses
                application default credentials if not set)
            client: Preconfigured client, used as is when given
        """
        self.bucket_name = bucket_name

        if client is None:
            kwargs: dict = {}
            if project:
                kwargs["project"] = project
            if credentials_path:
                kwargs["credentials"] = service_account.Credentials.from_service_account_file(
                    credentials_path
                )
            client = gcs.Client(**kwargs)

        self._client = client
        self._bucket = client.bucket(bucket_name)

    @property
    def driver(self) -> Driver:
        return Driver.GCS

    async def read(self, path: str) -> BinaryIO:
        blob = self._bucket.blob(path)
        try:
            content = await asyncio.to_thread(blob.download_as_bytes)
        except NotFound as e:
            raise ObjectNotFoundError(path, cause=e) from e
        return BytesIO(content)

    async def write(self, path: str, contents: bytes) -> None:
        blob = self._bucket.blob(path)
        await asyncio.to_thread(blob.upload_from_string, contents)

    async def delete(self, path: str) -> None:
        blob = self._bucket.blob(path)
        try:
            await asyncio.to_thread(blob.delete)
        except NotFound as e:
            raise ObjectNotFoundError(path, cause=e) from e

    async def exists(self, path: str) -> bool:
        blob = self._bucket.blob(path)
        return await asyncio.to_thread(blob.exists)

    async def rename(self, old_path: str, new_path: str) -> None:
        """
        Copy old_path to new_path, then delete old_path.

        If the delete fails the object exists at both paths; the delete
        error is raised unchanged. Renaming an object onto itself only
        checks that it exists.
        """
        if old_path == new_path:
            if not await self.exists(old_path):
                raise ObjectNotFoundError(old_path)
            return

        await self.copy(old_path, new_path)
        try:
            await self.delete(old_path)
        except Exception:
            logger.warning(
                f"Rename of {old_path} to {new_path} copied the object but failed "
                f"to delete the source; it now exists at both paths"
            )
            raise

    async def copy(self, source_path: str, destination_path: str) -> None:
        if source_path == destination_path:
            if not await self.exists(source_path):
                raise ObjectNotFoundError(source_path)
            return

        source = self._bucket.blob(source_path)
        try:
            await asyncio.to_thread(
                self._bucket.copy_blob, source, self._bucket, destination_path
            )
        except NotFound as e:
            raise ObjectNotFoundError(source_path, cause=e) from e

    async def create_directory(self, path: str) -> None:
        """
        Write a zero-byte marker object at "<path>/".

        The upload only succeeds if no marker exists yet; an existing
        marker counts as success.
        """
        if not path.strip(SEPARATOR):
            raise InvalidPathError(f"Invalid directory path: {path!r}", path=path)

        marker = self._bucket.blob(directory_marker(path))
        try:
            await asyncio.to_thread(marker.upload_from_string, b"", if_generation_match=0)
        except PreconditionFailed:
            logger.debug(f"Directory marker {marker.name} already exists")

    async def get_url(self, path: str) -> str:
        """
        Build the public-style URL of an object.

        Neither existence nor public access is checked.
        """
        return f"https://storage.googleapis.com/{self.bucket_name}/{path}"

    async def open(self, path: str) -> BinaryIO:
        """
        Download an object to a temporary local file, rewound to the start.

        The caller owns the file; closing it deletes it.
        """
        blob = self._bucket.blob(path)
        temp_file = tempfile.NamedTemporaryFile(prefix="gcs_temp_")
        try:
            await asyncio.to_thread(blob.download_to_file, temp_file)
            temp_file.seek(0)
        except Exception as e:
            temp_file.close()
            if isinstance(e, NotFound):
                raise ObjectNotFoundError(path, cause=e) from e
            raise
        return temp_file

    async def upload(self, file: BinaryIO, filename: str, directory: str) -> BinaryIO:
        """
        Stream a file into directory/filename, then open() the new object.

        The object is downloaded again so the caller gets a local file.
        """
        path = join_path(directory, filename)
        blob = self._bucket.blob(path)
        await asyncio.to_thread(blob.upload_from_file, file)
        logger.debug(f"Uploaded {path} to bucket {self.bucket_name}")
        return await self.open(path)
