import pytest

STORAGE_ENV_VARS = [
    "LOG_LEVEL",
    "STORAGE_DRIVER",
    "STORAGE_BASE_PATH",
    "GCS_BUCKET_NAME",
    "GCS_PROJECT",
    "GCS_CREDENTIALS_FILE",
    "S3_BUCKET_NAME",
    "S3_REGION",
    "S3_ENDPOINT_URL",
    "S3_ACCESS_KEY_ID",
    "S3_SECRET_ACCESS_KEY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep storage settings in the host environment out of tests."""
    for var in STORAGE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
