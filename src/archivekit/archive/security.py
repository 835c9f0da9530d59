"""Entry-name validation for archives (zip-slip prevention)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath


class UnsafeArchivePath(ValueError):
    """Raised when an archive entry name would escape the extraction root."""


@dataclass(frozen=True)
class NormalizedEntryName:
    """A validated entry name, split into POSIX components."""

    raw: str
    normalized: str
    parts: tuple[str, ...]
    is_dir: bool

    @property
    def name(self) -> str:
        """Last component of the entry."""
        return self.parts[-1]


def normalize_entry_name(name: str) -> NormalizedEntryName:
    """
    Validate and normalize an entry name read from (or written to) an archive.

    - Backslashes become slashes
    - Leading `./` is dropped
    - Absolute names and `..` components are rejected
    - A trailing slash marks a directory entry
    """
    if not isinstance(name, str) or not name:
        raise UnsafeArchivePath("Empty entry name.")

    cleaned = name.replace("\\", "/")
    is_dir = cleaned.endswith("/")
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]

    posix = PurePosixPath(cleaned)
    if posix.is_absolute() or (len(cleaned) > 1 and cleaned[1] == ":"):
        raise UnsafeArchivePath(f"Absolute entry names are not allowed: {name}")

    parts = []
    for part in posix.parts:
        if part in {"", "."}:
            continue
        if part == "..":
            raise UnsafeArchivePath(f"Path traversal is not allowed: {name}")
        parts.append(part)

    if not parts:
        raise UnsafeArchivePath(f"Invalid entry name: {name}")

    return NormalizedEntryName(
        raw=name, normalized="/".join(parts), parts=tuple(parts), is_dir=is_dir
    )
