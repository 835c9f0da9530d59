"""Celery tasks for archivekit.

Celery autodiscovery imports the `archivekit.tasks` module. Import task
modules here to ensure they are registered when workers start.
"""

# pylint: disable=unused-import

from archivekit.tasks import archive  # noqa: F401
