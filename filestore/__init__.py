"""Uniform file storage over memory, local disk, GCS and S3 backends."""

__version__ = "0.1.0"
