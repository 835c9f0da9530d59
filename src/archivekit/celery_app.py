"""Celery application running archivekit tasks.

Configuration is read from the Django settings module (`CELERY_*` keys).
"""

from celery import Celery

app = Celery("archivekit")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks(["archivekit"])
