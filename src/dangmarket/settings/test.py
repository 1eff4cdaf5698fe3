"""Test settings: in-memory SQLite, fast hashing."""

from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret-key-not-for-production"
DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Let pytest's caplog see application logs
LOGGING["loggers"]["dangmarket"]["propagate"] = True  # noqa: F405
