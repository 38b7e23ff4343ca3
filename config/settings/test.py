"""
Settings used by the pytest suite.

SQLite in memory, local-memory cache, in-memory e-mail outbox and eager
Celery so tasks run inline inside the test process.
"""

from .base import *  # noqa: F403,F405

SECRET_KEY = "test-secret-key-not-for-production"

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost", "127.0.0.1"]

ENVIRONMENT = "test"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
        "ATOMIC_REQUESTS": True,
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "retail-pos-tests",
    }
}

# Fast hashing keeps user fixtures cheap
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
DEFAULT_FROM_EMAIL = "noreply@retailpos.test"
SERVER_EMAIL = DEFAULT_FROM_EMAIL

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

POS_TAX_RATE = Decimal("0.10")  # noqa: F405
POS_STORE_NAME = "Test Store"
POS_STORE_ADDRESS = "1 Test Street"
POS_STORE_PHONE = "555-0100"
POS_STORE_EMAIL = "store@retailpos.test"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "null": {"class": "logging.NullHandler"},
    },
    "root": {"handlers": ["null"], "level": "WARNING"},
}

SENTRY_DSN = ""
