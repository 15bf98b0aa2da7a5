"""
Factory for creating storage backends based on configuration.

Callers select a backend by Driver at configuration time and then use
it only through the StorageBackend interface.
"""
from typing import TYPE_CHECKING

from filestore.storage.base import Driver, StorageBackend
from filestore.storage.local import LocalStorageBackend
from filestore.storage.memory import MemoryStorageBackend

if TYPE_CHECKING:
    from filestore.config import Settings


def parse_driver(value: Driver | str) -> Driver:
    """
    Parse a driver name.

    Raises:
        ValueError: If value is not one of memory, local, gcs, s3
    """
    if isinstance(value, Driver):
        return value
    try:
        return Driver(value.lower())
    except ValueError:
        supported = ", ".join(d.value for d in Driver)
        raise ValueError(
            f"Unsupported storage driver: {value!r}. Supported: {supported}"
        ) from None


def create_storage(driver: Driver | str, **options) -> StorageBackend:
    """
    Create a storage backend for a driver.

    Cloud SDKs are imported only when their backend is requested.

    Args:
        driver: Backend kind
        **options: Keyword arguments for the backend constructor

    Returns:
        Configured StorageBackend instance

    Raises:
        ValueError: If driver is not supported
    """
    driver = parse_driver(driver)

    if driver is Driver.MEMORY:
        return MemoryStorageBackend()
    if driver is Driver.LOCAL:
        return LocalStorageBackend(**options)
    if driver is Driver.GCS:
        from filestore.storage.gcs import GCSStorageBackend

        return GCSStorageBackend(**options)

    from filestore.storage.s3 import S3StorageBackend

    return S3StorageBackend(**options)


def get_storage(settings: "Settings | None" = None) -> StorageBackend:
    """
    Return storage backend based on configuration.

    This allows switching between memory, local and cloud storage
    by changing the STORAGE_DRIVER environment variable. Every call
    builds a new backend; keep the instance for the process lifetime.

    Args:
        settings: Settings to read (default: filestore.config.settings)

    Returns:
        StorageBackend instance

    Raises:
        ValueError: If STORAGE_DRIVER is not supported or a bucket name is missing
    """
    if settings is None:
        from filestore.config import settings

    driver = parse_driver(settings.STORAGE_DRIVER)

    if driver is Driver.MEMORY:
        return create_storage(driver)

    if driver is Driver.LOCAL:
        return create_storage(driver, base_path=settings.STORAGE_BASE_PATH)

    if driver is Driver.GCS:
        if not settings.GCS_BUCKET_NAME:
            raise ValueError("Bucket name required: set GCS_BUCKET_NAME")
        return create_storage(
            driver,
            bucket_name=settings.GCS_BUCKET_NAME,
            project=settings.GCS_PROJECT,
            credentials_path=settings.GCS_CREDENTIALS_FILE,
        )

    if not settings.S3_BUCKET_NAME:
        raise ValueError("Bucket name required: set S3_BUCKET_NAME")
    return create_storage(
        driver,
        bucket_name=settings.S3_BUCKET_NAME,
        region=settings.S3_REGION,
        endpoint_url=settings.S3_ENDPOINT_URL,
        aws_access_key_id=settings.S3_ACCESS_KEY_ID,
        aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
    )
