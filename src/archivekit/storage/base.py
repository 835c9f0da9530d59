"""PathStore contract and helpers shared by every backend."""

from __future__ import annotations

from contextlib import AbstractContextManager
from pathlib import PurePath
from typing import IO, Iterator, Protocol, Union, runtime_checkable

RawPath = Union[str, PurePath]


class UnsafeStoragePath(ValueError):
    """Raised when a path resolves outside the root of a confined store."""


@runtime_checkable
class PathStore(Protocol):
    """Hierarchical file system consumed by the archive components."""

    def path(self, raw: RawPath) -> PurePath:
        """Convert a raw path into this store's path type."""

    def exists(self, path: PurePath) -> bool: ...

    def is_dir(self, path: PurePath) -> bool: ...

    def is_symlink(self, path: PurePath) -> bool:
        """True when `path` itself is a symbolic link; links are never followed."""

    def list_children(self, path: PurePath) -> list[PurePath]:
        """Direct children of a directory, sorted by name."""

    def create_directories(self, path: PurePath) -> None: ...

    def open_read(self, path: PurePath) -> AbstractContextManager[IO[bytes]]: ...

    def open_write(self, path: PurePath) -> AbstractContextManager[IO[bytes]]:
        """Open for writing, truncating any existing file."""

    def delete(self, path: PurePath) -> None:
        """Delete a file or an empty directory."""


def copy_stream(src: IO[bytes], dst: IO[bytes], buffer_size: int = 8 * 1024) -> int:
    """Copy `src` into `dst` through a bounded buffer; return bytes copied."""

    copied = 0
    for chunk in iter(lambda: src.read(buffer_size), b""):
        dst.write(chunk)
        copied += len(chunk)
    return copied


def iter_files(store: PathStore, root: PurePath) -> Iterator[PurePath]:
    """Yield every regular file under `root`, depth-first in listing order.

    Symbolic links are neither yielded nor descended into.
    """

    for child in store.list_children(root):
        if store.is_symlink(child):
            continue
        if store.is_dir(child):
            yield from iter_files(store, child)
        else:
            yield child


def delete_tree(store: PathStore, path: PurePath) -> None:
    """Delete `path` and, for directories, everything below it.

    A symbolic link is removed as a link; its target is left alone.
    """

    if store.is_symlink(path):
        store.delete(path)
        return
    if not store.exists(path):
        return
    if store.is_dir(path):
        for child in store.list_children(path):
            delete_tree(store, child)
    store.delete(path)


def ensure_parent(store: PathStore, path: PurePath) -> None:
    """Create the parent directories of `path` if it has any."""

    parent = path.parent
    if parent != path:
        store.create_directories(parent)
