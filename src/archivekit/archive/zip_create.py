"""Zip creation from a file or directory tree.

Entries are named relative to the parent of the source, so compressing
`/a/b` stores `b/...` and compressing `/a/b.txt` stores `b.txt`.

Symbolic links below the source are skipped, or refused in strict mode, so
nothing outside the source tree is read.

Known limitations:
- a failure midway leaves the partially written archive in place; nothing is
  rolled back.
- names go through the same normalization as entries read back, so a POSIX
  file name holding a backslash is stored with "/" in its place and an entry
  name whose second character is ":" is refused as drive-qualified.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from pathlib import PurePath

from archivekit.archive.container import ZipContainer, ZipWriterHandle
from archivekit.archive.security import normalize_entry_name
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
    UnsafeStoragePath,
    copy_stream,
    ensure_parent,
)

logger = getLogger(__name__)


def relative_entry_name(path: PurePath, base: PurePath) -> str:
    """Name of `path` inside an archive rooted at `base`."""

    if str(base) in {"", "."}:
        relative = path
    else:
        relative = path.relative_to(base)
    return normalize_entry_name(relative.as_posix()).normalized


@dataclass
class _WriteStats:
    files: int = 0
    bytes: int = 0
    skipped_symlinks: int = 0


class ArchiveWriter:
    """Writes a file or directory tree into a zip archive."""

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

    def compress(self, source: RawPath, archive_path: RawPath) -> OperationOutcome[None]:
        """Compress `source` into a new zip at `archive_path`."""
        try:
            source = self.store.path(source)
            archive_path = self.store.path(archive_path)
        except ValueError as exc:
            return Failure(wrap_error(exc, "Invalid path", phase="compress"))

        if not self.store.exists(source):
            return Failure(
                FileOperationError(
                    ErrorKind.NOT_FOUND,
                    f"Source path does not exist: {source}",
                    path=str(source),
                    phase="compress",
                )
            )

        stats = _WriteStats()
        try:
            ensure_parent(self.store, archive_path)
            with (
                self.store.open_write(archive_path) as out_fp,
                self.container.open_writer(out_fp) as writer,
            ):
                self._write_node(
                    source,
                    base=source.parent,
                    archive_path=archive_path,
                    writer=writer,
                    stats=stats,
                )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            error = wrap_error(
                exc,
                f"Failed to compress to ZIP: {source} -> {archive_path}",
                path=source,
                phase="compress",
            )
            logger.warning("archive_zip: failed (%r)", error)
            return Failure(error)

        if stats.skipped_symlinks:
            logger.warning(
                "archive_zip: skipped %s symlinks under %s",
                stats.skipped_symlinks,
                source,
            )
        logger.info(
            "archive_zip: done (source=%s archive=%s files=%s bytes=%s)",
            source,
            archive_path,
            stats.files,
            stats.bytes,
        )
        return Success(None)

    def _write_node(
        self,
        path: PurePath,
        *,
        base: PurePath,
        archive_path: PurePath,
        writer: ZipWriterHandle,
        stats: _WriteStats,
    ) -> None:
        if path == archive_path:
            # The archive being written lives inside the source tree.
            return

        if self.store.is_dir(path):
            for child in self.store.list_children(path):
                if self.store.is_symlink(child):
                    if self.settings.strict:
                        raise UnsafeStoragePath(f"Symlinks are not followed: {child}")
                    stats.skipped_symlinks += 1
                    continue
                self._write_node(
                    child,
                    base=base,
                    archive_path=archive_path,
                    writer=writer,
                    stats=stats,
                )
            return

        entry_name = relative_entry_name(path, base)
        try:
            with (
                self.store.open_read(path) as in_fp,
                writer.put_entry(entry_name) as entry_fp,
            ):
                written = copy_stream(
                    in_fp, entry_fp, self.settings.transfer_buffer_size
                )
        except FileOperationError:
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise wrap_error(
                exc, f"Failed to compress file: {path}", path=path, phase="compress"
            ) from exc

        stats.files += 1
        stats.bytes += written
        logger.debug("archive_zip: added %s (%s bytes)", entry_name, written)
