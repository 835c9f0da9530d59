"""PathStore adapter over a Django `Storage` backend.

Names are POSIX paths relative to the storage root. On storages exposing a
local path (`FileSystemStorage`), directories are real directories; on
object stores they are implicit prefixes and `create_directories` is a no-op.
"""

from __future__ import annotations

import errno
import os
import tempfile
from contextlib import contextmanager
from pathlib import PurePosixPath
from typing import IO, Iterator

from django.core.files.base import File
from django.core.files.storage import Storage, default_storage

from archivekit.storage.base import RawPath, UnsafeStoragePath

ROOT = PurePosixPath(".")


class DjangoStoragePathStore:
    """PathStore backed by any Django storage (defaults to `default_storage`)."""

    def __init__(
        self, storage: Storage | None = None, *, spool_max_size: int = 8 * 1024 * 1024
    ):
        self.storage = storage if storage is not None else default_storage
        self.spool_max_size = spool_max_size

    def __repr__(self) -> str:
        return f"DjangoStoragePathStore(storage={self.storage!r})"

    def path(self, raw: RawPath) -> PurePosixPath:
        text = str(raw).replace("\\", "/").lstrip("/")
        path = PurePosixPath(text) if text else ROOT
        if ".." in path.parts:
            raise UnsafeStoragePath(f"Path traversal is not allowed: {raw}")
        return path

    @staticmethod
    def _name(path: PurePosixPath) -> str:
        name = path.as_posix()
        return "" if name == "." else name

    def _local_path(self, path: PurePosixPath) -> str | None:
        try:
            return self.storage.path(self._name(path))
        except NotImplementedError:
            return None

    def exists(self, path: PurePosixPath) -> bool:
        if path == ROOT:
            return True
        if self.storage.exists(self._name(path)):
            return True
        return self.is_dir(path)

    def is_dir(self, path: PurePosixPath) -> bool:
        local = self._local_path(path)
        if local is not None:
            return os.path.isdir(local)
        if path == ROOT:
            return True
        try:
            dirs, _ = self.storage.listdir(self._name(path.parent))
        except (FileNotFoundError, NotADirectoryError):
            return False
        return path.name in dirs

    def is_symlink(self, path: PurePosixPath) -> bool:
        local = self._local_path(path)
        return local is not None and os.path.islink(local)

    def list_children(self, path: PurePosixPath) -> list[PurePosixPath]:
        local = self._local_path(path)
        if local is not None:
            if not os.path.exists(local):
                raise FileNotFoundError(errno.ENOENT, "No such directory", str(path))
            if not os.path.isdir(local):
                raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(path))
        dirs, files = self.storage.listdir(self._name(path))
        return sorted((path / name for name in [*dirs, *files]), key=lambda p: p.name)

    def create_directories(self, path: PurePosixPath) -> None:
        local = self._local_path(path)
        if local is not None:
            os.makedirs(local, exist_ok=True)

    @contextmanager
    def open_read(self, path: PurePosixPath) -> Iterator[IO[bytes]]:
        if self.is_dir(path):
            raise IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
        with self.storage.open(self._name(path), "rb") as f:
            yield f

    @contextmanager
    def open_write(self, path: PurePosixPath) -> Iterator[IO[bytes]]:
        """Spool writes locally, then save under the exact name on close."""
        if self.is_dir(path):
            raise IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
        name = self._name(path)
        with tempfile.SpooledTemporaryFile(
            max_size=self.spool_max_size, prefix="archivekit-"
        ) as tmp:
            yield tmp
            tmp.seek(0)
            # `save` never overwrites; it would pick an alternative name.
            if self.storage.exists(name):
                self.storage.delete(name)
            self.storage.save(name, File(tmp, name=os.path.basename(name)))

    def delete(self, path: PurePosixPath) -> None:
        if not self.exists(path):
            raise FileNotFoundError(errno.ENOENT, "No such file", str(path))
        self.storage.delete(self._name(path))
