"""
Tests for the archive celery tasks (run eagerly, status kept in the cache).
"""

from django.core.cache import cache

import pytest

from archivekit.tasks.archive import (
    compress_task,
    decompress_task,
    get_archive_job_status,
    read_string_from_zip_task,
)


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    monkeypatch.setenv("ARCHIVEKIT_TEMP_DIR", str(tmp_path / "tmp"))
    cache.clear()


def test_tasks_compress_decompress_and_read(tmp_path):
    (tmp_path / "tree" / "sub").mkdir(parents=True)
    (tmp_path / "tree" / "sub" / "b.txt").write_text("bravo")
    archive = tmp_path / "out" / "tree.zip"

    compressed = compress_task.apply(
        kwargs={"source": str(tmp_path / "tree"), "archive_path": str(archive)},
        task_id="job-compress",
    ).get()
    assert compressed == {"ok": True, "value": None, "error": None}
    assert get_archive_job_status("job-compress")["state"] == "done"

    decompressed = decompress_task.apply(
        kwargs={"archive_path": str(archive), "destination": str(tmp_path / "restored")},
        task_id="job-decompress",
    ).get()
    assert decompressed["ok"] is True
    assert (tmp_path / "restored" / "tree" / "sub" / "b.txt").read_text() == "bravo"

    read = read_string_from_zip_task.apply(
        kwargs={"archive_path": str(archive), "target_relative_path": "tree/sub/b.txt"},
        task_id="job-read",
    ).get()
    assert read["value"] == "bravo"
    assert get_archive_job_status("job-read")["result"]["value"] == "bravo"
    assert list((tmp_path / "tmp").iterdir()) == []


def test_tasks_failure_is_recorded(tmp_path):
    result = decompress_task.apply(
        kwargs={
            "archive_path": str(tmp_path / "missing.zip"),
            "destination": str(tmp_path / "dest"),
            "job_id": "job-missing",
        },
    ).get()

    assert result["ok"] is False
    assert result["error"]["kind"] == "not_found"
    status = get_archive_job_status("job-missing")
    assert status["state"] == "failed"
    assert status["operation"] == "decompress"
    assert status["errors"][0]["kind"] == "not_found"
    assert not (tmp_path / "dest").exists()


def test_tasks_unknown_job_status():
    assert get_archive_job_status("never-started")["state"] == "unknown"
