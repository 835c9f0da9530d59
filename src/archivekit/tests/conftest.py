"""Fixtures shared by the archivekit test suite."""

import pytest

from archivekit.archive.service import ArchiveService
from archivekit.conf import ArchiveSettings
from archivekit.storage.localfs import LocalPathStore
from archivekit.storage.memory import InMemoryPathStore


@pytest.fixture(params=["local", "memory"])
def store(request, tmp_path):
    """Every store-level test runs against the host filesystem and the fake."""
    if request.param == "local":
        return LocalPathStore(root=tmp_path)
    return InMemoryPathStore()


@pytest.fixture
def archive_settings():
    return ArchiveSettings(temp_directory="scratch", scratch_prefix="extract-")


@pytest.fixture
def service(store, archive_settings):
    return ArchiveService(store=store, settings=archive_settings)
