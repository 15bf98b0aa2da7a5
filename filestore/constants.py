from enum import Enum


class Driver(str, Enum):
    """Identifying name of a backend kind."""

    MEMORY = "memory"
    LOCAL = "local"
    GCS = "gcs"
    S3 = "s3"
