"""Zip container handles used by the archive writer and reader.

Only entry bookkeeping lives here; deflate/CRC work is left to `zipfile`.
"""

from __future__ import annotations

import shutil
import stat
import tempfile
import zipfile
from contextlib import contextmanager
from dataclasses import dataclass
from typing import IO, Iterator


def _zipinfo_is_symlink(info: zipfile.ZipInfo) -> bool:
    """
    Best-effort detection of symlink entries in zip files.

    Zip has no first-class type flag; on Unix, external attributes carry the mode.
    """

    mode = (int(getattr(info, "external_attr", 0)) >> 16) & 0o170000
    return mode == stat.S_IFLNK


@dataclass(frozen=True)
class ArchiveEntryInfo:
    """An entry as listed by the container, in stored order."""

    name: str
    is_dir: bool
    is_symlink: bool
    size: int


class ZipWriterHandle:
    """Write side of an open zip container."""

    def __init__(self, zf: zipfile.ZipFile):
        self._zf = zf

    @contextmanager
    def put_entry(self, name: str) -> Iterator[IO[bytes]]:
        """Open a new entry; the entry is closed when the block exits."""
        with self._zf.open(name, mode="w", force_zip64=True) as entry_fp:
            yield entry_fp


class ZipReaderHandle:
    """Read side of an open zip container."""

    def __init__(self, zf: zipfile.ZipFile):
        self._zf = zf

    def entries(self) -> Iterator[ArchiveEntryInfo]:
        for info in self._zf.infolist():
            yield ArchiveEntryInfo(
                name=info.filename,
                is_dir=info.is_dir(),
                is_symlink=_zipinfo_is_symlink(info),
                size=int(info.file_size or 0),
            )

    @contextmanager
    def open_entry(self, entry: ArchiveEntryInfo) -> Iterator[IO[bytes]]:
        with self._zf.open(entry.name, mode="r") as entry_fp:
            yield entry_fp


class ZipContainer:
    """Factory for zip writer/reader handles over binary file objects."""

    def __init__(
        self, compression: int = zipfile.ZIP_DEFLATED, compresslevel: int | None = None
    ):
        self.compression = compression
        self.compresslevel = compresslevel

    @contextmanager
    def open_writer(self, fileobj: IO[bytes]) -> Iterator[ZipWriterHandle]:
        with zipfile.ZipFile(
            fileobj,
            mode="w",
            compression=self.compression,
            compresslevel=self.compresslevel,
            allowZip64=True,
        ) as zf:
            yield ZipWriterHandle(zf)

    @contextmanager
    def open_reader(self, fileobj: IO[bytes]) -> Iterator[ZipReaderHandle]:
        """Open a zip for reading, spooling non-seekable sources to disk first."""
        seekable = getattr(fileobj, "seekable", None)
        if seekable is not None and seekable():
            with zipfile.ZipFile(fileobj, mode="r") as zf:
                yield ZipReaderHandle(zf)
            return

        with tempfile.TemporaryFile(prefix="archivekit-archive-") as local_fp:
            shutil.copyfileobj(fileobj, local_fp, length=1024 * 1024)
            local_fp.seek(0)
            with zipfile.ZipFile(local_fp, mode="r") as zf:
                yield ZipReaderHandle(zf)
