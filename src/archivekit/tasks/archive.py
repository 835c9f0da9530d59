"""Archive celery tasks.

Each task runs one synchronous archive operation against the local
filesystem and keeps a job payload in the Django cache for status polling.
"""

from __future__ import annotations

from logging import getLogger

from django.core.cache import cache

from archivekit.archive.service import ArchiveService
from archivekit.celery_app import app
from archivekit.outcome import Failure, OperationOutcome

logger = getLogger(__name__)


def archive_job_cache_key(job_id: str) -> str:
    """Cache key for an archive job payload."""
    return f"archive_job:{job_id}"


def set_archive_job_status(
    job_id: str, payload: dict, ttl_seconds: int = 24 * 3600
) -> None:
    """Persist job status payload in cache."""
    cache.set(archive_job_cache_key(job_id), payload, timeout=ttl_seconds)


def get_archive_job_status(job_id: str) -> dict:
    """Return cached job payload or an 'unknown' placeholder."""
    return cache.get(archive_job_cache_key(job_id)) or {
        "state": "unknown",
        "operation": None,
        "errors": [],
    }


def _run_job(job_id: str, operation: str, run) -> dict:
    set_archive_job_status(
        job_id, {"state": "running", "operation": operation, "errors": []}
    )
    try:
        outcome: OperationOutcome = run(ArchiveService())
    except Exception as exc:  # pylint: disable=broad-exception-caught
        status = get_archive_job_status(job_id)
        status.update({"state": "failed", "errors": [{"detail": str(exc)}]})
        # Keep a best-effort status for pollers.
        set_archive_job_status(job_id, status)
        logger.exception("archive_%s: failed (job_id=%s)", operation, job_id)
        raise

    result = outcome.to_dict()
    if isinstance(outcome, Failure):
        payload = {
            "state": "failed",
            "operation": operation,
            "errors": [outcome.error.to_dict()],
        }
        logger.warning(
            "archive_%s: failed (job_id=%s error=%r)", operation, job_id, outcome.error
        )
    else:
        payload = {"state": "done", "operation": operation, "errors": []}
    payload["result"] = result
    set_archive_job_status(job_id, payload)
    return result


@app.task(bind=True, name="archivekit.archive.compress")
def compress_task(self, source: str, archive_path: str, job_id: str | None = None):
    job_id = job_id or self.request.id
    return _run_job(
        job_id, "compress", lambda service: service.compress(source, archive_path)
    )


@app.task(bind=True, name="archivekit.archive.decompress")
def decompress_task(self, archive_path: str, destination: str, job_id: str | None = None):
    job_id = job_id or self.request.id
    return _run_job(
        job_id,
        "decompress",
        lambda service: service.decompress(archive_path, destination),
    )


@app.task(bind=True, name="archivekit.archive.read_string_from_zip")
def read_string_from_zip_task(
    self,
    archive_path: str,
    target_relative_path: str | None = None,
    delete_after: bool = True,
    job_id: str | None = None,
):
    job_id = job_id or self.request.id
    return _run_job(
        job_id,
        "read_string_from_zip",
        lambda service: service.read_string_from_zip(
            archive_path, target_relative_path, delete_after
        ),
    )
