"""Archive settings.

All settings are configurable via environment variables and are read once,
when a component is built. Components receive the resulting
`ArchiveSettings` explicitly.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass


def _env_int(name: str, default: int | None) -> int | None:
    """Read an integer env var, returning `default` on missing/invalid."""

    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(name: str) -> bool:
    return str(os.environ.get(name, "")).lower() in {"1", "true", "yes"}


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass(frozen=True)
class ArchiveSettings:
    """Knobs shared by the archive components."""

    transfer_buffer_size: int = 8 * 1024
    scratch_prefix: str = "archivekit-extract-"
    temp_directory: str = tempfile.gettempdir()
    compresslevel: int | None = None
    strict: bool = False

    def __post_init__(self):
        if self.transfer_buffer_size <= 0:
            raise ValueError("transfer_buffer_size must be positive.")


def get_archive_settings() -> ArchiveSettings:
    """Read archive settings from environment variables."""

    buffer_size = _env_int("ARCHIVEKIT_TRANSFER_BUFFER_SIZE", 8 * 1024)
    if buffer_size is None or buffer_size <= 0:
        buffer_size = 8 * 1024
    return ArchiveSettings(
        transfer_buffer_size=buffer_size,
        scratch_prefix=_env_str("ARCHIVEKIT_SCRATCH_PREFIX", "archivekit-extract-"),
        temp_directory=_env_str("ARCHIVEKIT_TEMP_DIR", tempfile.gettempdir()),
        compresslevel=_env_int("ARCHIVEKIT_ZIP_COMPRESSLEVEL", None),
        strict=_env_bool("ARCHIVEKIT_STRICT"),
    )
