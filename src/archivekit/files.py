"""Single-file operations over a PathStore, returning outcomes."""

from __future__ import annotations

from logging import getLogger
from pathlib import PurePath

from archivekit.conf import ArchiveSettings, get_archive_settings
from archivekit.outcome import (
    ErrorKind,
    Failure,
    FileOperationError,
    OperationOutcome,
    Success,
    wrap_error,
)
from archivekit.storage.base import (
    PathStore,
    RawPath,
    copy_stream,
    delete_tree,
    ensure_parent,
)

logger = getLogger(__name__)


class FileOperations:
    """Read/write/copy/delete/list helpers bound to one store."""

    def __init__(self, store: PathStore, settings: ArchiveSettings | None = None):
        self.store = store
        self.settings = settings or get_archive_settings()

    def _missing(self, path: PurePath, message: str) -> Failure:
        return Failure(
            FileOperationError(ErrorKind.NOT_FOUND, f"{message}: {path}", path=str(path))
        )

    def write_bytes(
        self, path: RawPath, data: bytes, create_parent_directories: bool = True
    ) -> OperationOutcome[None]:
        try:
            path = self.store.path(path)
            if create_parent_directories:
                ensure_parent(self.store, path)
            with self.store.open_write(path) as fp:
                fp.write(data)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return Failure(wrap_error(exc, f"Failed to write file: {path}", path=path))
        return Success(None)

    def write_text(
        self, path: RawPath, content: str, create_parent_directories: bool = True
    ) -> OperationOutcome[None]:
        return self.write_bytes(
            path, content.encode("utf-8"), create_parent_directories
        )

    def read_bytes(self, path: RawPath) -> OperationOutcome[bytes]:
        try:
            path = self.store.path(path)
            if not self.store.exists(path):
                return self._missing(path, "File does not exist")
            with self.store.open_read(path) as fp:
                return Success(fp.read())
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return Failure(wrap_error(exc, f"Failed to read file: {path}", path=path))

    def read_text(self, path: RawPath) -> OperationOutcome[str]:
        outcome = self.read_bytes(path)
        if isinstance(outcome, Failure):
            return outcome
        try:
            return Success(outcome.value.decode("utf-8"))
        except UnicodeDecodeError as exc:
            return Failure(wrap_error(exc, f"File is not valid UTF-8: {path}", path=path))

    def exists(self, path: RawPath) -> OperationOutcome[bool]:
        try:
            return Success(self.store.exists(self.store.path(path)))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return Failure(wrap_error(exc, f"Failed to check path: {path}", path=path))

    def delete(self, path: RawPath, recursively: bool = False) -> OperationOutcome[None]:
        """Delete a file or directory; deleting a missing path succeeds."""
        try:
            path = self.store.path(path)
            if not self.store.exists(path):
                return Success(None)
            if recursively:
                delete_tree(self.store, path)
            else:
                self.store.delete(path)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return Failure(wrap_error(exc, f"Failed to delete: {path}", path=path))
        return Success(None)

    def copy_file(
        self,
        source: RawPath,
        destination: RawPath,
        create_parent_directories: bool = True,
    ) -> OperationOutcome[None]:
        try:
            source = self.store.path(source)
            destination = self.store.path(destination)
            if not self.store.exists(source):
                return self._missing(source, "Source file doesn't exist")
            if self.store.is_dir(source):
                return Failure(
                    FileOperationError(
                        ErrorKind.IS_A_DIRECTORY,
                        f"Source is a directory, not a file: {source}",
                        path=str(source),
                    )
                )
            if create_parent_directories:
                ensure_parent(self.store, destination)
            with (
                self.store.open_read(source) as in_fp,
                self.store.open_write(destination) as out_fp,
            ):
                copied = copy_stream(in_fp, out_fp, self.settings.transfer_buffer_size)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return Failure(
                wrap_error(exc, f"Failed to copy {source} -> {destination}", path=source)
            )
        logger.debug("files: copied %s -> %s (%s bytes)", source, destination, copied)
        return Success(None)

    def create_directories(self, path: RawPath) -> OperationOutcome[None]:
        try:
            path = self.store.path(path)
            self.store.create_directories(path)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return Failure(
                wrap_error(exc, f"Failed to create directories: {path}", path=path)
            )
        return Success(None)

    def list_directory(self, path: RawPath) -> OperationOutcome[list[PurePath]]:
        try:
            path = self.store.path(path)
            if not self.store.exists(path):
                return self._missing(path, "Directory doesn't exist")
            if not self.store.is_dir(path):
                return Failure(
                    FileOperationError(
                        ErrorKind.NOT_A_DIRECTORY,
                        f"Path is not a directory: {path}",
                        path=str(path),
                    )
                )
            return Success(self.store.list_children(path))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return Failure(
                wrap_error(exc, f"Failed to list directory: {path}", path=path)
            )
