# config/settings/test.py
from .base import *  # noqa

DEBUG = False

# Postgres is opt-in for tests (the threaded oversell test only runs there)
if os.getenv("TEST_DB_ENGINE", "sqlite").lower() != "postgres":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "test.sqlite3",
        }
    }

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LOGGING["loggers"]["dental_core"]["level"] = "WARNING"
