"""
S3-compatible storage implementation (AWS S3, MinIO, SeaweedFS).

Operations go through an aioboto3 session; a client is opened per call.
Error codes meaning "object absent" are translated to ObjectNotFoundError,
any other ClientError is raised unchanged.
"""
import tempfile
from io import BytesIO
from typing import BinaryIO

import aioboto3
from botocore.exceptions import ClientError

from filestore.logging_config import setup_logging
from filestore.storage.base import Driver, StorageBackend
from filestore.storage.exceptions import InvalidPathError, ObjectNotFoundError
from filestore.utils.paths import SEPARATOR, directory_marker, join_path

logger = setup_logging("filestore.s3")

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}

# Stream downloads in 64KB chunks
CHUNK_SIZE = 64 * 1024


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def _is_not_found(error: ClientError) -> bool:
    return _error_code(error) in _NOT_FOUND_CODES


class S3StorageBackend(StorageBackend):
    """
    Storage backed by a single S3 bucket.

    Supports both AWS S3 and S3-compatible servers (via endpoint_url).
    rename() is copy then delete and is not atomic. open() and upload()
    hand back a temporary local copy that is deleted when closed.
    """

    def __init__(
        self,
        bucket_name: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        session: aioboto3.Session | None = None,
    ):
        """
        Initialize S3 storage backend.

        Args:
            bucket_name: S3 bucket name
            region: AWS region
            endpoint_url: Custom endpoint URL for MinIO (None for AWS S3)
            aws_access_key_id: AWS access key (optional, uses env/IAM if not set)
            aws_secret_access_key: AWS secret key (optional, uses env/IAM if not set)
            session: Preconfigured aioboto3 session, used as is when given
        """
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self._session = session or aioboto3.Session()

    @property
    def driver(self) -> Driver:
        return Driver.S3

    def _get_client_kwargs(self) -> dict:
        """Build kwargs for S3 client."""
        kwargs = {
            "region_name": self.region,
        }
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        if self.aws_access_key_id and self.aws_secret_access_key:
            kwargs["aws_access_key_id"] = self.aws_access_key_id
            kwargs["aws_secret_access_key"] = self.aws_secret_access_key
        return kwargs

    def _client(self):
        return self._session.client("s3", **self._get_client_kwargs())

    async def read(self, path: str) -> BinaryIO:
        async with self._client() as s3:
            try:
                response = await s3.get_object(Bucket=self.bucket_name, Key=path)
                content = await response["Body"].read()
            except ClientError as e:
                if _is_not_found(e):
                    raise ObjectNotFoundError(path, cause=e) from e
                raise
        return BytesIO(content)

    async def write(self, path: str, contents: bytes) -> None:
        async with self._client() as s3:
            await s3.put_object(Bucket=self.bucket_name, Key=path, Body=contents)

    async def delete(self, path: str) -> None:
        """
        Delete an object.

        S3 reports success when deleting an absent key, so existence is
        checked first.
        """
        async with self._client() as s3:
            try:
                await s3.head_object(Bucket=self.bucket_name, Key=path)
            except ClientError as e:
                if _is_not_found(e):
                    raise ObjectNotFoundError(path, cause=e) from e
                raise
            await s3.delete_object(Bucket=self.bucket_name, Key=path)

    async def exists(self, path: str) -> bool:
        async with self._client() as s3:
            try:
                await s3.head_object(Bucket=self.bucket_name, Key=path)
                return True
            except ClientError as e:
                if _is_not_found(e):
                    return False
                raise

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

        async with self._client() as s3:
            try:
                await s3.copy_object(
                    Bucket=self.bucket_name,
                    Key=destination_path,
                    CopySource={"Bucket": self.bucket_name, "Key": source_path},
                )
            except ClientError as e:
                if _is_not_found(e):
                    raise ObjectNotFoundError(source_path, cause=e) from e
                raise

    async def create_directory(self, path: str) -> None:
        """
        Write a zero-byte marker object at "<path>/".

        The put is conditional on the key being absent; an existing
        marker counts as success.
        """
        if not path.strip(SEPARATOR):
            raise InvalidPathError(f"Invalid directory path: {path!r}", path=path)

        marker = directory_marker(path)
        async with self._client() as s3:
            try:
                await s3.put_object(
                    Bucket=self.bucket_name, Key=marker, Body=b"", IfNoneMatch="*"
                )
            except ClientError as e:
                if _error_code(e) != "PreconditionFailed":
                    raise
                logger.debug(f"Directory marker {marker} already exists")

    async def get_url(self, path: str) -> str:
        """
        Build the URL of an object.

        Neither existence nor public access is checked.
        """
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{path}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{path}"

    async def open(self, path: str) -> BinaryIO:
        """
        Download an object to a temporary local file, rewound to the start.

        The caller owns the file; closing it deletes it.
        """
        temp_file = tempfile.NamedTemporaryFile(prefix="s3_temp_")
        try:
            async with self._client() as s3:
                response = await s3.get_object(Bucket=self.bucket_name, Key=path)
                body = response["Body"]
                while chunk := await body.read(CHUNK_SIZE):
                    temp_file.write(chunk)
            temp_file.seek(0)
        except Exception as e:
            temp_file.close()
            if isinstance(e, ClientError) and _is_not_found(e):
                raise ObjectNotFoundError(path, cause=e) from e
            raise
        return temp_file

    async def upload(self, file: BinaryIO, filename: str, directory: str) -> BinaryIO:
        """
        Stream a file into directory/filename, then open() the new object.

        The object is downloaded again so the caller gets a local file.
        """
        path = join_path(directory, filename)
        async with self._client() as s3:
            await s3.upload_fileobj(file, self.bucket_name, path)
        logger.debug(f"Uploaded {path} to bucket {self.bucket_name}")
        return await self.open(path)
