"""
Tests for single-file operations.
"""

import pytest

from archivekit.files import FileOperations
from archivekit.outcome import ErrorKind, Failure, Success


@pytest.fixture(name="ops")
def fixture_ops(store, archive_settings):
    return FileOperations(store, settings=archive_settings)


def test_files_write_and_read_text(ops):
    assert ops.write_text("notes/today.txt", "héllo wörld").is_success

    assert ops.read_text("notes/today.txt") == Success("héllo wörld")


def test_files_write_and_read_bytes(ops):
    assert ops.write_bytes("bin/data.bin", b"\x00\x01\x02").is_success

    assert ops.read_bytes("bin/data.bin") == Success(b"\x00\x01\x02")


def test_files_write_without_parent_creation_fails(ops):
    outcome = ops.write_text("no/parent.txt", "x", create_parent_directories=False)

    assert isinstance(outcome, Failure)
    assert outcome.kind == ErrorKind.NOT_FOUND


def test_files_read_missing_file(ops):
    outcome = ops.read_text("missing.txt")

    assert isinstance(outcome, Failure)
    assert outcome.kind == ErrorKind.NOT_FOUND
    assert "File does not exist" in outcome.error.message


def test_files_read_directory(ops):
    ops.create_directories("a/dir")

    outcome = ops.read_bytes("a/dir")

    assert isinstance(outcome, Failure)
    assert outcome.kind == ErrorKind.IS_A_DIRECTORY


def test_files_exists(ops):
    ops.write_text("here.txt", "x")

    assert ops.exists("here.txt") == Success(True)
    assert ops.exists("gone.txt") == Success(False)


def test_files_delete(ops):
    ops.write_text("dir/a.txt", "a")
    ops.write_text("dir/sub/b.txt", "b")

    assert ops.delete("dir/a.txt").is_success
    assert ops.exists("dir/a.txt") == Success(False)

    not_empty = ops.delete("dir")
    assert isinstance(not_empty, Failure)
    assert not_empty.kind == ErrorKind.IO_FAILURE

    assert ops.delete("dir", recursively=True).is_success
    assert ops.exists("dir") == Success(False)
    assert ops.delete("dir").is_success


def test_files_copy_file(ops):
    ops.write_text("src/a.txt", "copy me")

    assert ops.copy_file("src/a.txt", "dst/deep/a.txt").is_success
    assert ops.read_text("dst/deep/a.txt") == Success("copy me")
    assert ops.read_text("src/a.txt") == Success("copy me")


def test_files_copy_file_errors(ops):
    ops.create_directories("a/dir")

    missing = ops.copy_file("nope.txt", "x.txt")
    assert isinstance(missing, Failure)
    assert missing.kind == ErrorKind.NOT_FOUND

    directory = ops.copy_file("a/dir", "x.txt")
    assert isinstance(directory, Failure)
    assert directory.kind == ErrorKind.IS_A_DIRECTORY


def test_files_list_directory(ops, store):
    ops.write_text("d/b.txt", "b")
    ops.write_text("d/a.txt", "a")
    ops.create_directories("d/c")

    listed = ops.list_directory("d")

    assert listed.is_success
    assert [p.name for p in listed.value] == ["a.txt", "b.txt", "c"]
    assert store.is_dir(listed.value[2])


def test_files_list_directory_errors(ops):
    ops.write_text("f.txt", "f")

    missing = ops.list_directory("missing")
    assert isinstance(missing, Failure)
    assert missing.kind == ErrorKind.NOT_FOUND

    not_dir = ops.list_directory("f.txt")
    assert isinstance(not_dir, Failure)
    assert not_dir.kind == ErrorKind.NOT_A_DIRECTORY
