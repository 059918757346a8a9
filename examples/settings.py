"""Django settings for the example development server.

Mirrors the test settings with a persistent SQLite database, DEBUG mode
and configuration read from ``examples/.env``.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "example-dev-key-not-for-production")
SALT_KEY = os.environ.get("FIELD_ENCRYPTION_SALT_KEY", "example-salt-key-not-for-production")
DEBUG = True
ALLOWED_HOSTS = ["*"]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.messages",
    "django.contrib.sessions",
    "django.contrib.staticfiles",
    "conference_site",
    "conference_site.registration",
    "conference_site.payments",
    "conference_site.poll",
    "conference_site.dashboard",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

ROOT_URLCONF = "urls"

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
                "conference_site.context_processors.site_context",
            ],
        },
    },
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
USE_TZ = True

STATIC_URL = "static/"

FIELD_ENCRYPTION_KEY = os.environ.get("FIELD_ENCRYPTION_KEY", "YBkocJMq0EEDhDBHQk2eMdBPhQrUzV8adaSz4mbHcFQ=")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"console": {"class": "logging.StreamHandler"}},
    "loggers": {"conference_site": {"handlers": ["console"], "level": "INFO"}},
}

# Gmail SMTP when credentials are present, console output otherwise.
EMAIL_HOST_USER = os.environ.get("EMAIL_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_PASS", "")
if EMAIL_HOST_USER and EMAIL_HOST_PASSWORD:
    EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"
    EMAIL_HOST = "smtp.gmail.com"
    EMAIL_PORT = 587
    EMAIL_USE_TLS = True
else:
    EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
DEFAULT_FROM_EMAIL = EMAIL_HOST_USER or "info@godscoffeecall.com"


def _int_or_none(name: str) -> int | None:
    value = os.environ.get(name, "").strip()
    return int(value) if value.isdigit() else None


CONFERENCE_SITE = {
    "stripe": {
        "secret_key": os.environ.get("STRIPE_SECRET_KEY", ""),
        "publishable_key": os.environ.get("STRIPE_PUBLISHABLE_KEY", ""),
        "webhook_secret": os.environ.get("STRIPE_WEBHOOK_SECRET", ""),
    },
    "email": {
        "from_email": DEFAULT_FROM_EMAIL,
        "admin_email": os.environ.get("ADMIN_EMAIL", ""),
    },
    "merch": {
        "tee_price_id": os.environ.get("STRIPE_TEE_PRICE_ID", ""),
        "tee_price_cents": _int_or_none("STRIPE_TEE_PRICE_CENTS"),
        "image_url": os.environ.get("STRIPE_TEE_IMAGE_URL", ""),
        "price_ids_by_size": {
            size: os.environ[f"STRIPE_PRICE_ID_{size}"]
            for size in ("XS", "S", "M", "L", "XL", "2XL", "3XL")
            if os.environ.get(f"STRIPE_PRICE_ID_{size}")
        },
    },
    "dashboard": {
        "password": os.environ.get("ADMIN_DASH_PASSWORD", ""),
        "cookie_secure": False,
    },
    "base_url": os.environ.get("SITE_BASE_URL", "http://localhost:8000"),
    "trusted_hosts": ("localhost", "127.0.0.1", "godscoffeecall.com"),
}
