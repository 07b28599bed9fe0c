# padel_club/settings/test.py
from .base import *

SECRET_KEY = "test-not-secret"
DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
}

# No staticfiles manifest in tests
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

RATELIMIT_ENABLE = False
ENABLE_PUSH = True
EXPO_PUSH_URL = "https://push.test/--/api/v2/push/send"
EXPO_ACCESS_TOKEN = ""

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
