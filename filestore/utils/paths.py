"""Path helpers shared by all storage backends."""

SEPARATOR = "/"


def join_path(directory: str, filename: str) -> str:
    """
    Join a directory prefix and a filename with a single "/".

    The same key is produced for every backend, whatever the host OS.
    An empty directory yields the bare filename.
    """
    directory = directory.rstrip(SEPARATOR)
    filename = filename.lstrip(SEPARATOR)
    if not directory:
        return filename
    return f"{directory}{SEPARATOR}{filename}"


def is_directory_path(path: str) -> bool:
    """Return True if path looks like a directory reference (trailing "/")."""
    return path.endswith(SEPARATOR) and path.strip(SEPARATOR) != ""


def directory_marker(path: str) -> str:
    """
    Return the key of the zero-byte marker object for a directory.

    "docs" and "docs/" both map to "docs/".
    """
    return path.rstrip(SEPARATOR) + SEPARATOR
