"""Local filesystem PathStore.

Paths are native `pathlib.Path` objects. When a `root` is given, relative
paths are resolved below it and anything escaping it is refused.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

from archivekit.storage.base import RawPath, UnsafeStoragePath


class LocalPathStore:
    """PathStore backed by the host filesystem."""

    def __init__(self, root: RawPath | None = None):
        self.root = Path(root) if root is not None else None

    def __repr__(self) -> str:
        return f"LocalPathStore(root={str(self.root) if self.root else None!r})"

    def path(self, raw: RawPath) -> Path:
        target = Path(os.fspath(raw))
        if self.root is None:
            return target

        root_resolved = self.root.resolve(strict=False)
        if not target.is_absolute():
            target = self.root / target
        resolved = target.resolve(strict=False)
        try:
            _ = resolved.relative_to(root_resolved)
        except ValueError as exc:
            raise UnsafeStoragePath(f"Path escapes store root: {raw}") from exc
        return resolved

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_symlink(self, path: Path) -> bool:
        return path.is_symlink()

    def list_children(self, path: Path) -> list[Path]:
        if not path.exists():
            raise FileNotFoundError(f"Directory doesn't exist: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {path}")
        return sorted(path.iterdir(), key=lambda p: p.name)

    def create_directories(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def open_read(self, path: Path) -> Iterator[IO[bytes]]:
        with path.open("rb") as f:
            yield f

    @contextmanager
    def open_write(self, path: Path) -> Iterator[IO[bytes]]:
        with path.open("wb") as f:
            yield f

    def delete(self, path: Path) -> None:
        if path.is_dir() and not path.is_symlink():
            path.rmdir()
        else:
            path.unlink()
