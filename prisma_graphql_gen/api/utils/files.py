"""Filesystem helpers for reading and writing artifacts."""

from pathlib import Path
from typing import Optional


def read_existing_file(path) -> Optional[str]:
    """Return the file's text, or None when it does not exist."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def write_file_safely(path, content: str) -> Path:
    """Write *content* to *path*, creating missing parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
