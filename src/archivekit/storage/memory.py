"""In-memory PathStore used as a fake in tests and for throwaway trees."""

from __future__ import annotations

import errno
import io
import threading
from contextlib import contextmanager
from pathlib import PurePosixPath
from typing import IO, Iterator

from archivekit.storage.base import RawPath

ROOT = PurePosixPath("/")


class InMemoryPathStore:
    """
    A POSIX namespace kept in dictionaries.

    Errors mirror what the host filesystem raises so that callers see the same
    exception types whichever backend they run against.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._files: dict[PurePosixPath, bytes] = {}
        self._dirs: set[PurePosixPath] = {ROOT}

    def path(self, raw: RawPath) -> PurePosixPath:
        text = str(raw).replace("\\", "/")
        return ROOT / PurePosixPath(text)

    def exists(self, path: PurePosixPath) -> bool:
        with self._lock:
            return path in self._files or path in self._dirs

    def is_dir(self, path: PurePosixPath) -> bool:
        with self._lock:
            return path in self._dirs

    def is_symlink(self, path: PurePosixPath) -> bool:  # pylint: disable=unused-argument
        return False

    def list_children(self, path: PurePosixPath) -> list[PurePosixPath]:
        with self._lock:
            if path in self._files:
                raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(path))
            if path not in self._dirs:
                raise FileNotFoundError(errno.ENOENT, "No such directory", str(path))
            children = [p for p in self._files if p.parent == path]
            children += [p for p in self._dirs if p != ROOT and p.parent == path]
        return sorted(children, key=lambda p: p.name)

    def create_directories(self, path: PurePosixPath) -> None:
        with self._lock:
            for candidate in [*reversed(path.parents), path]:
                if candidate in self._files:
                    raise FileExistsError(errno.EEXIST, "File exists", str(candidate))
                self._dirs.add(candidate)

    @contextmanager
    def open_read(self, path: PurePosixPath) -> Iterator[IO[bytes]]:
        with self._lock:
            if path in self._dirs:
                raise IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
            if path not in self._files:
                raise FileNotFoundError(errno.ENOENT, "No such file", str(path))
            data = self._files[path]
        with io.BytesIO(data) as f:
            yield f

    @contextmanager
    def open_write(self, path: PurePosixPath) -> Iterator[IO[bytes]]:
        with self._lock:
            if path in self._dirs:
                raise IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
            if path.parent not in self._dirs:
                raise FileNotFoundError(
                    errno.ENOENT, "No such directory", str(path.parent)
                )
            self._files[path] = b""
        buf = io.BytesIO()
        try:
            yield buf
        finally:
            # Whatever was written is kept, even when the writer failed midway.
            with self._lock:
                self._files[path] = buf.getvalue()
            buf.close()

    def delete(self, path: PurePosixPath) -> None:
        with self._lock:
            if path in self._files:
                del self._files[path]
                return
            if path not in self._dirs:
                raise FileNotFoundError(errno.ENOENT, "No such file", str(path))
            if path == ROOT:
                raise PermissionError(errno.EPERM, "Cannot delete root", str(path))
            has_children = any(p.parent == path for p in self._files) or any(
                p.parent == path for p in self._dirs if p != ROOT
            )
            if has_children:
                raise OSError(errno.ENOTEMPTY, "Directory not empty", str(path))
            self._dirs.discard(path)
