"""Wiring of the archive components around explicit collaborators."""

from __future__ import annotations

from archivekit.archive.container import ZipContainer
from archivekit.archive.extract import ArchiveReader
from archivekit.archive.locate import ZipExtractionLocator
from archivekit.archive.zip_create import ArchiveWriter
from archivekit.conf import ArchiveSettings, get_archive_settings
from archivekit.outcome import OperationOutcome
from archivekit.storage.base import PathStore, RawPath
from archivekit.storage.localfs import LocalPathStore


class ArchiveService:
    """Single entry point for compress / decompress / read-from-zip."""

    def __init__(
        self,
        store: PathStore | None = None,
        container: ZipContainer | None = None,
        settings: ArchiveSettings | None = None,
    ):
        self.store = store if store is not None else LocalPathStore()
        self.settings = settings or get_archive_settings()
        self.container = container or ZipContainer(
            compresslevel=self.settings.compresslevel
        )
        self.writer = ArchiveWriter(self.store, self.container, self.settings)
        self.reader = ArchiveReader(self.store, self.container, self.settings)
        self.locator = ZipExtractionLocator(self.store, self.reader, self.settings)

    def compress(self, source: RawPath, archive_path: RawPath) -> OperationOutcome[None]:
        return self.writer.compress(source, archive_path)

    def decompress(
        self, archive_path: RawPath, destination: RawPath
    ) -> OperationOutcome[None]:
        return self.reader.decompress(archive_path, destination)

    def read_string_from_zip(
        self,
        archive_path: RawPath,
        target_relative_path: str | None = None,
        delete_after: bool = True,
    ) -> OperationOutcome[str]:
        return self.locator.read_string_from_zip(
            archive_path, target_relative_path, delete_after
        )
