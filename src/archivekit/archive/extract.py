"""Zip extraction into a destination directory.

Security:
- zip-slip/path traversal prevention via strict entry-name normalization
- symlink entries are skipped (refused in strict mode)

Known limitation: extraction aborts on the first error and leaves whatever
was already written under the destination.
"""

from __future__ import annotations

from logging import getLogger
from pathlib import PurePath

from archivekit.archive.container import ArchiveEntryInfo, ZipContainer, ZipReaderHandle
from archivekit.archive.security import UnsafeArchivePath, normalize_entry_name
from archivekit.conf import ArchiveSettings, get_archive_settings
from archivekit.outcome import (
    ErrorKind,
    Failure,
    FileOperationError,
    OperationOutcome,
    Success,
    wrap_error,
)
from archivekit.storage.base import PathStore, RawPath, copy_stream, ensure_parent

logger = getLogger(__name__)


def entry_target(destination: PurePath, entry_name: str) -> PurePath:
    """Destination path for an entry; refuses names escaping `destination`."""

    normalized = normalize_entry_name(entry_name)
    return destination.joinpath(*normalized.parts)


class ArchiveReader:
    """Materializes every entry of a zip archive under a destination directory."""

    def __init__(
        self,
        store: PathStore,
        container: ZipContainer | None = None,
        settings: ArchiveSettings | None = None,
    ):
        self.store = store
        self.settings = settings or get_archive_settings()
        self.container = container or ZipContainer(
            compresslevel=self.settings.compresslevel
        )

    def decompress(
        self, archive_path: RawPath, destination: RawPath
    ) -> OperationOutcome[None]:
        """Extract the zip at `archive_path` into `destination`."""
        try:
            archive_path = self.store.path(archive_path)
            destination = self.store.path(destination)
        except ValueError as exc:
            return Failure(wrap_error(exc, "Invalid path", phase="extract"))

        if not self.store.exists(archive_path):
            return Failure(
                FileOperationError(
                    ErrorKind.NOT_FOUND,
                    f"ZIP file does not exist: {archive_path}",
                    path=str(archive_path),
                    phase="extract",
                )
            )

        files_done = 0
        bytes_done = 0
        skipped_symlinks_count = 0
        try:
            self.store.create_directories(destination)
            with (
                self.store.open_read(archive_path) as archive_fp,
                self.container.open_reader(archive_fp) as reader,
            ):
                for entry in reader.entries():
                    if entry.is_symlink:
                        if self.settings.strict:
                            raise UnsafeArchivePath(
                                f"Symlink entries are not allowed: {entry.name}"
                            )
                        skipped_symlinks_count += 1
                        continue
                    written = self._extract_entry(reader, entry, destination)
                    if written is not None:
                        files_done += 1
                        bytes_done += written
        except Exception as exc:  # pylint: disable=broad-exception-caught
            error = wrap_error(
                exc,
                f"Failed to decompress ZIP: {archive_path} -> {destination}",
                path=archive_path,
                phase="extract",
            )
            logger.warning("archive_extract: failed (%r)", error)
            return Failure(error)

        if skipped_symlinks_count:
            logger.warning(
                "archive_extract: skipped %s symlink entries in %s",
                skipped_symlinks_count,
                archive_path,
            )
        logger.info(
            "archive_extract: done (archive=%s destination=%s files=%s bytes=%s)",
            archive_path,
            destination,
            files_done,
            bytes_done,
        )
        return Success(None)

    def _extract_entry(
        self, reader: ZipReaderHandle, entry: ArchiveEntryInfo, destination: PurePath
    ) -> int | None:
        """Write one entry; return bytes written, or None for directories."""
        target = entry_target(destination, entry.name)

        if entry.is_dir:
            self.store.create_directories(target)
            return None

        ensure_parent(self.store, target)
        with (
            reader.open_entry(entry) as entry_fp,
            self.store.open_write(target) as out_fp,
        ):
            return copy_stream(entry_fp, out_fp, self.settings.transfer_buffer_size)
