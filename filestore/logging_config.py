"""
Logging configuration for the storage layer.

All backends log through the "filestore" logger hierarchy so that an
application can route storage messages with a single handler.
"""
import logging
import sys

from filestore.config import settings


def setup_logging(name: str = "filestore") -> logging.Logger:
    """
    Configure and return a storage logger.

    The root "filestore" logger outputs to stdout with the format
    timestamp - logger name - level - message. Child loggers
    (e.g. "filestore.gcs") propagate to it.

    Args:
        name: Logger name, "filestore" or one of its children

    Returns:
        logging.Logger: Configured logger instance
    """
    root = logging.getLogger("filestore")
    root.setLevel(settings.LOG_LEVEL)

    # Prevent duplicate handlers if called multiple times
    if not root.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(settings.LOG_LEVEL)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    return logging.getLogger(name)
