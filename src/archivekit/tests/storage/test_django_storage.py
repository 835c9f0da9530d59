"""
Tests for the Django storage PathStore adapter.
"""

import os

from django.core.files.storage import FileSystemStorage

import pytest

from archivekit.archive.service import ArchiveService
from archivekit.conf import ArchiveSettings
from archivekit.outcome import ErrorKind, Failure, Success
from archivekit.storage.base import UnsafeStoragePath
from archivekit.storage.django_storage import DjangoStoragePathStore
from archivekit.tests.utils import get_file, put_file, put_zip, zip_namelist


@pytest.fixture(name="django_store")
def fixture_django_store(tmp_path):
    return DjangoStoragePathStore(FileSystemStorage(location=str(tmp_path)))


def test_django_storage_overwrite_keeps_exact_name(django_store, tmp_path):
    """Saving over an existing name replaces it instead of picking a new name."""

    put_file(django_store, "a/b.txt", b"first")
    put_file(django_store, "a/b.txt", b"second")

    assert (tmp_path / "a" / "b.txt").read_bytes() == b"second"
    assert sorted(p.name for p in (tmp_path / "a").iterdir()) == ["b.txt"]


def test_django_storage_directories(django_store, tmp_path):
    django_store.create_directories(django_store.path("x/y"))
    put_file(django_store, "x/file.txt", b"f")

    assert (tmp_path / "x" / "y").is_dir()
    assert django_store.is_dir(django_store.path("x"))
    assert not django_store.is_dir(django_store.path("x/file.txt"))
    assert [p.name for p in django_store.list_children(django_store.path("x"))] == [
        "file.txt",
        "y",
    ]


def test_django_storage_refuses_traversal(django_store):
    with pytest.raises(UnsafeStoragePath):
        django_store.path("../escape.txt")


def test_django_storage_default_storage(settings, tmp_path):
    """Without an explicit storage the adapter uses `default_storage`."""

    settings.MEDIA_ROOT = str(tmp_path)
    store = DjangoStoragePathStore()

    put_file(store, "hello.txt", b"hello")

    assert get_file(store, "hello.txt") == b"hello"


def test_django_storage_archive_round_trip(django_store):
    """compress, decompress and read_string_from_zip work through Django storage."""

    service = ArchiveService(
        store=django_store,
        settings=ArchiveSettings(temp_directory="scratch"),
    )
    put_file(django_store, "tree/a.txt", b"alpha")
    put_file(django_store, "tree/sub/b.txt", b"bravo")

    assert service.compress("tree", "zips/tree.zip").is_success
    assert zip_namelist(django_store, "zips/tree.zip") == ["tree/a.txt", "tree/sub/b.txt"]

    assert service.decompress("zips/tree.zip", "restored").is_success
    assert get_file(django_store, "restored/tree/sub/b.txt") == b"bravo"

    assert service.read_string_from_zip("zips/tree.zip", "tree/sub/b.txt") == Success(
        "bravo"
    )
    assert django_store.list_children(django_store.path("scratch")) == []


def test_django_storage_missing_archive(django_store):
    put_zip(django_store, "present.zip", [("a.txt", b"a")])
    service = ArchiveService(store=django_store, settings=ArchiveSettings())

    outcome = service.decompress("absent.zip", "dest")

    assert isinstance(outcome, Failure)
    assert outcome.kind == ErrorKind.NOT_FOUND


def test_django_storage_compress_skips_symlinks(django_store, tmp_path):
    """Symlinks inside a local storage location are not followed when zipping."""

    outside = tmp_path.parent / f"{tmp_path.name}-outside"
    outside.mkdir()
    (outside / "secret.txt").write_bytes(b"secret")
    put_file(django_store, "tree/a.txt", b"a")
    os.symlink(str(outside), str(tmp_path / "tree" / "link"))
    service = ArchiveService(
        store=django_store, settings=ArchiveSettings(temp_directory="scratch")
    )

    outcome = service.compress("tree", "t.zip")

    assert django_store.is_symlink(django_store.path("tree/link"))
    assert isinstance(outcome, Success)
    assert zip_namelist(django_store, "t.zip") == ["tree/a.txt"]
