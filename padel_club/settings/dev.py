from .base import *
import os
import environ

env = environ.Env()

# Try Render Secret Files first, then local project root as a fallback.
# If neither exists, we just rely on real environment variables.
_env_candidates = [
    os.path.join("/etc/secrets", ".dev.env"),
    os.path.join(str(BASE_DIR), ".dev.env"),
]
for _p in _env_candidates:
    if os.path.exists(_p):
        environ.Env.read_env(_p)
        break

DEBUG = True
ALLOWED_HOSTS = ["*"]  # dev

# Dev pushes go to Expo unless explicitly turned off
ENABLE_PUSH = env.bool("ENABLE_PUSH", default=True)
EXPO_ACCESS_TOKEN = env("EXPO_ACCESS_TOKEN_DEV", default=EXPO_ACCESS_TOKEN)

# Optional: verbose logging in dev
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
        },
    },
    "loggers": {
        # Our app package
        "club": {
            "handlers": ["console"],
            "level": "INFO",   # show .info() and above
            "propagate": False,
        },
        # Optionally quiet Django noise
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
}

# Debug toolbar
INSTALLED_APPS += [
    "debug_toolbar",
]
MIDDLEWARE.insert(0, "debug_toolbar.middleware.DebugToolbarMiddleware")
INTERNAL_IPS = ["127.0.0.1"]

# Faster password hasher for quicker dev/test user creation
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]
