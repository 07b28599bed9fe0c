import os
from .base import *

DEBUG = False
hosts = os.getenv("DJANGO_ALLOWED_HOSTS", "")
ALLOWED_HOSTS = [h for h in (hosts.split(",") if hosts else []) if h]
CSRF_TRUSTED_ORIGINS = [o for o in os.getenv("DJANGO_CSRF_TRUSTED", "").split(",") if o]

SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_REFERRER_POLICY = "strict-origin-when-cross-origin"
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

# Local prod-mode testing without HTTPS
if os.getenv("LOCAL_NO_SSL", "0") == "1":
    SECURE_SSL_REDIRECT = False
    SESSION_COOKIE_SECURE = False
    CSRF_COOKIE_SECURE = False

# Use hashed, compressed static file storage
STORAGES = globals().get("STORAGES", {})
STORAGES["staticfiles"] = {
    "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
}
globals()["STORAGES"] = STORAGES

# One year cache for hashed assets served by Whitenoise
WHITENOISE_MAX_AGE = 31536000

SESSION_COOKIE_HTTPONLY = True

# If behind a proxy/load balancer:
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")


# Content Security Policy (django-csp v4+); admin is the only HTML we serve
INSTALLED_APPS += ["csp"]
MIDDLEWARE.insert(0, "csp.middleware.CSPMiddleware")  # keep early in chain

CONTENT_SECURITY_POLICY = {
    "DIRECTIVES": {
        "default-src": ("'self'",),
        "img-src": ("'self'", "data:"),
        "object-src": ("'none'",),
        "frame-ancestors": ("'none'",),
    }
}

# Sentry (optional; enable by setting SENTRY_DSN)
SENTRY_DSN = os.getenv("SENTRY_DSN")
if SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration
    sentry_sdk.init(dsn=SENTRY_DSN, integrations=[DjangoIntegration()], traces_sample_rate=0.0)


# Structured-ish console logging for production
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {"class": "logging.StreamHandler"},
    },
    "root": {"handlers": ["console"], "level": "INFO"},
    "loggers": {
        "django.request": {"level": "WARNING", "handlers": ["console"], "propagate": False},
    },
}

# --- Push (Expo) ---
ENABLE_PUSH = (os.getenv("ENABLE_PUSH", "1").lower() in ("1", "true", "yes"))
EXPO_ACCESS_TOKEN = os.getenv("EXPO_ACCESS_TOKEN", "")
