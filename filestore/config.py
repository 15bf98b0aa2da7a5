from pydantic_settings import BaseSettings

from filestore.constants import Driver


class Settings(BaseSettings):
    # Logging settings
    LOG_LEVEL: str = "INFO"

    # Storage settings
    STORAGE_DRIVER: Driver = Driver.LOCAL
    STORAGE_BASE_PATH: str = "data/storage"

    # Google Cloud Storage settings
    GCS_BUCKET_NAME: str | None = None
    GCS_PROJECT: str | None = None
    GCS_CREDENTIALS_FILE: str | None = None  # service account key file

    # S3-compatible storage settings
    S3_BUCKET_NAME: str | None = None
    S3_REGION: str = "us-east-1"
    S3_ENDPOINT_URL: str | None = None  # MinIO / SeaweedFS, None for AWS
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = None

    # "extra": "ignore" skips environment variables that Settings does not define
    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
