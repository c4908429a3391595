"""
File and path utilities.
"""

from pathlib import Path


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe storage."""
    invalid_chars = '<>:"/\\|?*'
    for char in invalid_chars:
        filename = filename.replace(char, "_")
    return filename


def sanitize_namespace(namespace: str) -> str:
    """Normalize a slash separated storage namespace.

    Each segment is sanitized on its own and ``.``/``..`` segments are
    dropped so a namespace can never escape the storage root.
    """
    segments = [
        sanitize_filename(segment.strip())
        for segment in namespace.replace("\\", "/").split("/")
    ]
    return "/".join(segment for segment in segments if segment and segment not in {".", ".."})


def ensure_directory(path: str | Path) -> None:
    """Ensure directory exists, create if not."""
    Path(path).mkdir(parents=True, exist_ok=True)


def remove_if_exists(path: Path) -> bool:
    """Delete ``path`` when present. Returns True if a file was removed."""
    if path.exists():
        path.unlink()
        return True
    return False
