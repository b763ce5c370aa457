# backend/settings/prod.py
"""
PATH: backend/settings/prod.py

PRODUCTION SETTINGS (fail closed)

Startup is refused when:
- SECRET_KEY is missing or the dev placeholder
- ALLOWED_HOSTS, CORS_ALLOWED_ORIGINS or CSRF_TRUSTED_ORIGINS are empty
- an origin is plain http:// or points at localhost
- DATABASE_URL is missing or SQLite
- exchange stock compensation is switched off
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import EXCHANGES, LOGGING, MIDDLEWARE, BASE_DIR, env


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ImproperlyConfigured(message)


DEBUG = False

SECRET_KEY = env("SECRET_KEY").strip()
_require(
    bool(SECRET_KEY) and SECRET_KEY != "dev-insecure-change-me",
    "SECRET_KEY must be set to a strong value in production.",
)

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[])
_require(bool(ALLOWED_HOSTS), "ALLOWED_HOSTS must be set in production.")

# ----------------------------
# Database: Postgres only
# ----------------------------
_database_url = env("DATABASE_URL", default="").strip()
_require(bool(_database_url), "DATABASE_URL must be set in production.")
_require(
    not _database_url.startswith("sqlite"),
    "Refusing to start in production with a SQLite DATABASE_URL.",
)

DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)
DATABASES["default"]["ATOMIC_REQUESTS"] = False

# ----------------------------
# Static files (WhiteNoise)
# ----------------------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ----------------------------
# TLS behind a terminating proxy
# ----------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)
SECURE_HSTS_PRELOAD = env.bool("SECURE_HSTS_PRELOAD", default=False)

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = True
CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

# ----------------------------
# CORS / CSRF: explicit https origins
# ----------------------------
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=[])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=[])
CORS_ALLOW_CREDENTIALS = False

for _name, _origins in (
    ("CORS_ALLOWED_ORIGINS", CORS_ALLOWED_ORIGINS),
    ("CSRF_TRUSTED_ORIGINS", CSRF_TRUSTED_ORIGINS),
):
    _require(bool(_origins), f"{_name} must be set in production.")
    _require(
        not any("localhost" in o or "127.0.0.1" in o for o in _origins),
        f"Remove localhost from {_name} in production.",
    )
    _require(
        all(o.startswith("https://") for o in _origins),
        f"{_name} must be https:// in production.",
    )

# ----------------------------
# Exchanges
# ----------------------------
# a failed second stock step must be undone, otherwise the outgoing
# variation stays decremented while the exchange is still Pending
_require(
    bool(EXCHANGES.get("COMPENSATE_FAILED_STOCK")),
    "EXCHANGE_COMPENSATE_FAILED_STOCK cannot be disabled in production.",
)

LOGGING["root"]["level"] = "INFO"
