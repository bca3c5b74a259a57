# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS (pytest-django)

- In-memory SQLite by default; point TEST_DATABASE_URL at PostgreSQL to run
  the row-locking concurrency tests.
- Fast password hashing.
- Throttling off so API tests are deterministic.
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK, apply_db_timeouts, env

DEBUG = False
SECRET_KEY = "test-secret-key-not-for-production"

DATABASES = {
    "default": apply_db_timeouts(env.db("TEST_DATABASE_URL", default="sqlite://:memory:")),
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
}

DEFAULT_PAYMENT_METHOD = "Credit Card"
