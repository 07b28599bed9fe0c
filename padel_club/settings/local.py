# padel_club/settings/local.py

from .base import *
import os
import environ

# Prevent .dev.env (or your shell) from forcing Postgres locally
os.environ.pop("DATABASE_URL", None)

env = environ.Env()
env_file = BASE_DIR / ".dev.env"
if env_file.exists():
    environ.Env.read_env(str(env_file))

# --- General ---
DEBUG = True

SECRET_KEY = env(
    "SECRET_KEY",
    default="insecure-local-secret-key",  # only for local dev!
)

# --- Database ---
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}
DATABASES["default"]["CONN_MAX_AGE"] = 0  # no persistent connections

# --- Static files ---
STORAGES = globals().get("STORAGES", {})
STORAGES["staticfiles"] = {
    "BACKEND": "whitenoise.storage.CompressedStaticFilesStorage",
}
globals()["STORAGES"] = STORAGES

WHITENOISE_USE_FINDERS = True

# --- Hosts / CSRF ---
ALLOWED_HOSTS = [
    "localhost",
    "127.0.0.1",
]
CSRF_TRUSTED_ORIGINS = [
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]

# --- Push: off locally unless asked for, so cron runs don't ping real phones ---
ENABLE_PUSH = env.bool("LOCAL_ENABLE_PUSH", default=False)

# --- Logging ---
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {"class": "logging.StreamHandler"},
    },
    "loggers": {
        "club": {"handlers": ["console"], "level": "DEBUG", "propagate": False},
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
    },
}

# --- Debugging tools ---
INSTALLED_APPS += [
    "debug_toolbar",
]
MIDDLEWARE.insert(0, "debug_toolbar.middleware.DebugToolbarMiddleware")
INTERNAL_IPS = ["127.0.0.1"]

# --- Password hashing speed-up for local ---
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
