import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[2]

SECRET_KEY = os.getenv("SECRET_KEY") or os.getenv("DJANGO_SECRET_KEY", "dev-not-secret")
DEBUG = False  # overridden in dev.py

# Prefer modern env name; fall back to legacy DJANGO_ALLOWED_HOSTS for local/docker
hosts = os.getenv("ALLOWED_HOSTS") or os.getenv("DJANGO_ALLOWED_HOSTS", "")
ALLOWED_HOSTS = [h for h in (hosts.split(",") if hosts else []) if h]

csrf = os.getenv("CSRF_TRUSTED_ORIGINS") or os.getenv("DJANGO_CSRF_TRUSTED", "")
CSRF_TRUSTED_ORIGINS = [o for o in csrf.split(",") if o]


INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # third-party (enabled in prod.py when needed): "csp",
    # our apps:
    "club",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "padel_club.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "padel_club.wsgi.application"
ASGI_APPLICATION = "padel_club.asgi.application"

# DB (dev defaults to sqlite; override via env in dev/prod)
DATABASES = {
    "default": {
        "ENGINE": os.getenv("DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.getenv("DB_NAME", BASE_DIR / "db.sqlite3"),
        "USER": os.getenv("DB_USER", ""),
        "PASSWORD": os.getenv("DB_PASSWORD", ""),
        "HOST": os.getenv("DB_HOST", ""),
        "PORT": os.getenv("DB_PORT", ""),
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.Argon2PasswordHasher",        # preferred
    "django.contrib.auth.hashers.PBKDF2PasswordHasher",
    "django.contrib.auth.hashers.PBKDF2SHA1PasswordHasher",
    "django.contrib.auth.hashers.ScryptPasswordHasher",
]

LANGUAGE_CODE = "es-es"
TIME_ZONE = os.getenv("TIME_ZONE", "Europe/Madrid")
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"

# Rate Limit enabling
RATELIMIT_ENABLE = True
RATELIMIT_USE_CACHE = "default"
RATELIMIT_VIEW = "club.views.ratelimit_429"

# --- Auth redirects (shared across all envs) ---
LOGIN_URL = "/admin/login/"

# --- Push (Expo) ---
ENABLE_PUSH = (os.getenv("ENABLE_PUSH", "1").lower() in ("1", "true", "yes"))
EXPO_PUSH_URL = os.getenv("EXPO_PUSH_URL", "https://exp.host/--/api/v2/push/send")
EXPO_ACCESS_TOKEN = os.getenv("EXPO_ACCESS_TOKEN", "")
PUSH_TIMEOUT_SECONDS = int(os.getenv("PUSH_TIMEOUT_SECONDS", "10"))

# --- Review prompt gating ---
REVIEW_STORE = (os.getenv("REVIEW_STORE") or "model").lower()   # model | cache | memory
REVIEW_MIN_ACTIONS = int(os.getenv("REVIEW_MIN_ACTIONS", "3"))
REVIEW_DAYS_AFTER_FIRST_LAUNCH = int(os.getenv("REVIEW_DAYS_AFTER_FIRST_LAUNCH", "3"))
REVIEW_DAYS_BETWEEN_PROMPTS = int(os.getenv("REVIEW_DAYS_BETWEEN_PROMPTS", "30"))
