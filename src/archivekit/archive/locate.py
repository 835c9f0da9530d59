"""Extract a zip into a scratch directory and read one text file out of it.

Lookup order for the target file:
1. the exact relative path, when given and present;
2. the first extracted file whose name matches the target's last component;
3. with no target at all, the first extracted file.

The name-only fallback in (2) can return a file from a different directory
than the one requested. It is kept on purpose; callers needing an exact match
should check the path themselves.
"""

from __future__ import annotations

import random
from logging import getLogger
from pathlib import PurePath, PurePosixPath

from archivekit.archive.extract import ArchiveReader
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
    delete_tree,
    iter_files,
)

logger = getLogger(__name__)

SCRATCH_SUFFIX_MIN = 100_000
SCRATCH_SUFFIX_MAX = 999_999
# Used by confined stores when the configured temp directory is outside their root.
CONFINED_SCRATCH_DIRECTORY = ".archivekit-tmp"


def _target_parts(target_relative_path: str) -> tuple[str, ...]:
    text = target_relative_path.replace("\\", "/")
    parts = tuple(p for p in PurePosixPath(text).parts if p not in {"/", "", "."})
    if ".." in parts:
        raise FileOperationError(
            ErrorKind.NOT_FOUND,
            f"locate: target leaves the archive: {target_relative_path}",
            path=target_relative_path,
            phase="locate",
        )
    return parts


class ZipExtractionLocator:
    """Reads a text file out of a zip through a throwaway scratch directory."""

    def __init__(
        self,
        store: PathStore,
        reader: ArchiveReader | None = None,
        settings: ArchiveSettings | None = None,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.settings = settings or get_archive_settings()
        self.reader = reader or ArchiveReader(store, settings=self.settings)
        self.rng = rng or random.Random()

    def scratch_directory_name(self) -> str:
        suffix = self.rng.randint(SCRATCH_SUFFIX_MIN, SCRATCH_SUFFIX_MAX)
        return f"{self.settings.scratch_prefix}{suffix}"

    def scratch_root(self) -> PurePath:
        """Directory under which scratch directories are created."""
        try:
            return self.store.path(self.settings.temp_directory)
        except UnsafeStoragePath:
            logger.debug(
                "archive_locate: %s is outside %r, using %s",
                self.settings.temp_directory,
                self.store,
                CONFINED_SCRATCH_DIRECTORY,
            )
            return self.store.path(CONFINED_SCRATCH_DIRECTORY)

    def read_string_from_zip(
        self,
        archive_path: RawPath,
        target_relative_path: str | None = None,
        delete_after: bool = True,
    ) -> OperationOutcome[str]:
        """Extract `archive_path` and return the located file decoded as UTF-8."""
        try:
            archive_path = self.store.path(archive_path)
        except ValueError as exc:
            return Failure(wrap_error(exc, "Invalid archive path", phase="locate"))

        if not self.store.exists(archive_path):
            return Failure(
                FileOperationError(
                    ErrorKind.NOT_FOUND,
                    f"ZIP file does not exist: {archive_path}",
                    path=str(archive_path),
                    phase="locate",
                )
            )

        scratch: PurePath | None = None
        try:
            try:
                scratch = self.scratch_root() / self.scratch_directory_name()
                self.store.create_directories(scratch)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                return Failure(
                    wrap_error(
                        exc,
                        "scratch: failed to create scratch directory",
                        path=scratch,
                        phase="scratch",
                    )
                )

            extracted = self.reader.decompress(archive_path, scratch)
            if isinstance(extracted, Failure):
                return Failure(
                    wrap_error(
                        extracted.error,
                        f"extract: failed to extract {archive_path}",
                        path=archive_path,
                        phase="extract",
                    )
                )

            try:
                located = self._locate(scratch, target_relative_path)
            except FileOperationError as exc:
                return Failure(exc)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                return Failure(
                    wrap_error(
                        exc,
                        "locate: failed to search extracted files",
                        path=scratch,
                        phase="locate",
                    )
                )

            try:
                with self.store.open_read(located) as fp:
                    content = fp.read().decode("utf-8")
            except Exception as exc:  # pylint: disable=broad-exception-caught
                return Failure(
                    wrap_error(
                        exc,
                        f"read: failed to read {located} as UTF-8",
                        path=located,
                        phase="read",
                    )
                )

            logger.info(
                "archive_locate: done (archive=%s target=%s located=%s)",
                archive_path,
                target_relative_path,
                located,
            )
            return Success(content)
        finally:
            if delete_after and scratch is not None:
                self._cleanup(scratch)

    def _locate(self, scratch: PurePath, target_relative_path: str | None) -> PurePath:
        if target_relative_path is None:
            for path in iter_files(self.store, scratch):
                return path
            raise FileOperationError(
                ErrorKind.NOT_FOUND,
                "locate: archive contains no files",
                path=str(scratch),
                phase="locate",
            )

        parts = _target_parts(target_relative_path)
        if parts:
            exact = scratch.joinpath(*parts)
            if self.store.exists(exact):
                return exact

            wanted = parts[-1]
            for path in iter_files(self.store, scratch):
                if path.name == wanted:
                    logger.debug(
                        "archive_locate: %s matched by name only (%s)",
                        target_relative_path,
                        path,
                    )
                    return path

        raise FileOperationError(
            ErrorKind.NOT_FOUND,
            f"locate: file not found in archive: {target_relative_path}",
            path=target_relative_path,
            phase="locate",
        )

    def _cleanup(self, scratch: PurePath) -> None:
        try:
            delete_tree(self.store, scratch)
        except Exception:  # pylint: disable=broad-exception-caught
            # Best effort; the outcome already decided must win.
            logger.warning(
                "archive_locate: failed to delete scratch directory %s",
                scratch,
                exc_info=True,
            )
