# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- in-memory sqlite
- fast password hashing
- throttling off, quiet logging
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, REST_FRAMEWORK

DEBUG = False
SECRET_KEY = "test-only-secret-key-with-enough-length-for-hs256"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
}

for _logger in LOGGING["loggers"].values():
    _logger["level"] = "CRITICAL"
