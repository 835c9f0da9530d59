"""Django settings used by the test suite (no database)."""

import tempfile

SECRET_KEY = "archivekit-tests"
INSTALLED_APPS: list[str] = []
DATABASES: dict = {}
USE_TZ = True

MEDIA_ROOT = tempfile.gettempdir()

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "archivekit-tests",
    }
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = "memory://"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"console": {"class": "logging.StreamHandler"}},
    "loggers": {
        "archivekit": {"handlers": ["console"], "level": "INFO", "propagate": True},
    },
}
