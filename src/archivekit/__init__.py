"""File and zip-archive utilities returning explicit operation outcomes.

The module-level helpers run against the host filesystem with settings read
from the environment; build an `ArchiveService` to use another store.
"""

from archivekit.archive.service import ArchiveService
from archivekit.outcome import (
    ErrorKind,
    Failure,
    FileOperationError,
    OperationOutcome,
    Success,
)

__all__ = [
    "ArchiveService",
    "ErrorKind",
    "Failure",
    "FileOperationError",
    "OperationOutcome",
    "Success",
    "compress",
    "decompress",
    "read_string_from_zip",
]


def compress(source, archive_path):
    """Compress a file or directory into a zip on the local filesystem."""
    return ArchiveService().compress(source, archive_path)


def decompress(archive_path, destination):
    """Extract a local zip into `destination`."""
    return ArchiveService().decompress(archive_path, destination)


def read_string_from_zip(archive_path, target_relative_path=None, delete_after=True):
    """Read one text file out of a local zip."""
    return ArchiveService().read_string_from_zip(
        archive_path, target_relative_path, delete_after
    )
