"""
Conftest for storage tests.

The cloud backends run against in-process fakes of the google-cloud-storage
client and the aioboto3 session, so no network access or credentials are
needed.
"""
import pytest
from botocore.exceptions import ClientError
from google.api_core.exceptions import NotFound, PreconditionFailed

from filestore.storage.gcs import GCSStorageBackend
from filestore.storage.local import LocalStorageBackend
from filestore.storage.memory import MemoryStorageBackend
from filestore.storage.s3 import S3StorageBackend


# Google Cloud Storage fakes

class FakeBlob:
    def __init__(self, bucket: "FakeBucket", name: str):
        self.bucket = bucket
        self.name = name

    def download_as_bytes(self) -> bytes:
        if self.name not in self.bucket.objects:
            raise NotFound(f"No such object: {self.bucket.name}/{self.name}")
        return self.bucket.objects[self.name]

    def download_to_file(self, file_obj) -> None:
        file_obj.write(self.download_as_bytes())

    def upload_from_string(self, data, if_generation_match=None) -> None:
        if if_generation_match == 0 and self.name in self.bucket.objects:
            raise PreconditionFailed(f"Object {self.name} already exists")
        if isinstance(data, str):
            data = data.encode()
        self.bucket.objects[self.name] = bytes(data)

    def upload_from_file(self, file_obj) -> None:
        self.bucket.objects[self.name] = file_obj.read()

    def delete(self) -> None:
        if self.name not in self.bucket.objects:
            raise NotFound(f"No such object: {self.bucket.name}/{self.name}")
        del self.bucket.objects[self.name]

    def exists(self) -> bool:
        return self.name in self.bucket.objects


class FakeBucket:
    def __init__(self, name: str):
        self.name = name
        self.objects: dict[str, bytes] = {}

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self, name)

    def copy_blob(self, blob: FakeBlob, destination_bucket: "FakeBucket", new_name: str) -> FakeBlob:
        destination_bucket.objects[new_name] = blob.download_as_bytes()
        return FakeBlob(destination_bucket, new_name)


class FakeGCSClient:
    def __init__(self):
        self.buckets: dict[str, FakeBucket] = {}

    def bucket(self, name: str) -> FakeBucket:
        return self.buckets.setdefault(name, FakeBucket(name))


# S3 fakes

def make_client_error(code: str, operation: str = "TestOp") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeBody:
    def __init__(self, content: bytes):
        self._content = content
        self._position = 0
        self.read_sizes: list[int | None] = []

    async def read(self, amt: int | None = None) -> bytes:
        self.read_sizes.append(amt)
        end = len(self._content) if amt is None else self._position + amt
        chunk = self._content[self._position:end]
        self._position += len(chunk)
        return chunk


class FakeS3Client:
    def __init__(self, objects: dict[tuple[str, str], bytes], bodies: list[FakeBody]):
        self.objects = objects
        self.bodies = bodies

    async def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise make_client_error("NoSuchKey", "GetObject")
        body = FakeBody(self.objects[(Bucket, Key)])
        self.bodies.append(body)
        return {"Body": body}

    async def put_object(self, Bucket, Key, Body, IfNoneMatch=None):
        if IfNoneMatch == "*" and (Bucket, Key) in self.objects:
            raise make_client_error("PreconditionFailed", "PutObject")
        self.objects[(Bucket, Key)] = bytes(Body)
        return {}

    async def head_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise make_client_error("404", "HeadObject")
        return {"ContentLength": len(self.objects[(Bucket, Key)])}

    async def delete_object(self, Bucket, Key):
        self.objects.pop((Bucket, Key), None)
        return {}

    async def copy_object(self, Bucket, Key, CopySource):
        source = (CopySource["Bucket"], CopySource["Key"])
        if source == (Bucket, Key):
            # S3 refuses to copy an object onto itself without changing metadata
            raise make_client_error("InvalidRequest", "CopyObject")
        if source not in self.objects:
            raise make_client_error("NoSuchKey", "CopyObject")
        self.objects[(Bucket, Key)] = self.objects[source]
        return {}

    async def upload_fileobj(self, Fileobj, Bucket, Key):
        self.objects[(Bucket, Key)] = Fileobj.read()


class FakeClientContext:
    def __init__(self, client: FakeS3Client):
        self._client = client

    async def __aenter__(self) -> FakeS3Client:
        return self._client

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class FakeS3Session:
    def __init__(self):
        self.objects: dict[tuple[str, str], bytes] = {}
        self.client_kwargs: list[dict] = []
        self.bodies: list[FakeBody] = []

    def client(self, service_name: str, **kwargs) -> FakeClientContext:
        assert service_name == "s3"
        self.client_kwargs.append(kwargs)
        return FakeClientContext(FakeS3Client(self.objects, self.bodies))


@pytest.fixture
def gcs_client():
    return FakeGCSClient()


@pytest.fixture
def s3_session():
    return FakeS3Session()


@pytest.fixture
def s3_client_class():
    return FakeS3Client


@pytest.fixture
def memory_storage():
    return MemoryStorageBackend()


@pytest.fixture
def local_storage(tmp_path):
    return LocalStorageBackend(base_path=str(tmp_path / "storage"))


@pytest.fixture
def gcs_storage(gcs_client):
    return GCSStorageBackend(bucket_name="test-bucket", client=gcs_client)


@pytest.fixture
def s3_storage(s3_session):
    return S3StorageBackend(bucket_name="test-bucket", session=s3_session)


@pytest.fixture(params=["memory", "local", "gcs", "s3"])
def storage(request):
    """Every backend in turn, for contract tests."""
    return request.getfixturevalue(f"{request.param}_storage")
