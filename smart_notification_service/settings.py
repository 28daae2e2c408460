"""Django settings for the smart notification service.

Configuration is read from environment variables so the same image runs
locally, in CI and in Kubernetes:

    DJANGO_SECRET_KEY, DJANGO_DEBUG, DJANGO_ALLOWED_HOSTS
    DATABASE_HOST, DATABASE_PORT, DATABASE_NAME, DATABASE_USER, DATABASE_PASSWORD
    REDIS_URL
    SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASSWORD, SMTP_USE_TLS, FROM_EMAIL
    SMS_GATEWAY_URL, SMS_GATEWAY_API_KEY, SMS_GATEWAY_TIMEOUT
    SMART_NOTIFICATIONS_* (engine limits, quiet hours and batching)
    TIME_ZONE
"""

import os
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-local-development-key")

DEBUG = _env_bool("DJANGO_DEBUG", False)

ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

SERVICE_NAME = os.getenv("SERVICE_NAME", "smart-notification-service")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django.contrib.staticfiles",
    "rest_framework",
    "django_rq",
    "engine",
]

MIDDLEWARE = [
    "engine.middleware.RequestIDMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "smart_notification_service.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "smart_notification_service.wsgi.application"
ASGI_APPLICATION = "smart_notification_service.asgi.application"

# Database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "HOST": os.getenv("DATABASE_HOST", "localhost"),
        "PORT": os.getenv("DATABASE_PORT", "5432"),
        "NAME": os.getenv("DATABASE_NAME", "smart_notifications"),
        "USER": os.getenv("DATABASE_USER", "postgres"),
        "PASSWORD": os.getenv("DATABASE_PASSWORD", ""),
        "CONN_MAX_AGE": _env_int("DATABASE_CONN_MAX_AGE", 60),
        "OPTIONS": {"connect_timeout": _env_int("DATABASE_CONNECT_TIMEOUT", 5)},
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("TIME_ZONE", "UTC")
USE_I18N = False
USE_TZ = True

STATIC_URL = "static/"

# Django REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "EXCEPTION_HANDLER": "engine.exceptions.custom_exception_handler",
    "UNAUTHENTICATED_USER": None,
}

# Background jobs (django-rq)
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

RQ_QUEUES = {
    "default": {
        "URL": REDIS_URL,
        "DEFAULT_TIMEOUT": 300,
    },
}

# Email (SMTP)
EMAIL_HOST = os.getenv("SMTP_HOST", "localhost")
EMAIL_PORT = _env_int("SMTP_PORT", 587)
EMAIL_HOST_USER = os.getenv("SMTP_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("SMTP_PASSWORD", "")
EMAIL_USE_TLS = _env_bool("SMTP_USE_TLS", True)
EMAIL_TIMEOUT = _env_int("SMTP_TIMEOUT", 10)
DEFAULT_FROM_EMAIL = os.getenv("FROM_EMAIL", "notifications@example.com")

# SMS gateway
SMS_GATEWAY_URL = os.getenv("SMS_GATEWAY_URL", "http://localhost:8090/api/v1")
SMS_GATEWAY_API_KEY = os.getenv("SMS_GATEWAY_API_KEY", "")
SMS_GATEWAY_TIMEOUT = _env_int("SMS_GATEWAY_TIMEOUT", 10)

# Smart notification engine
SMART_NOTIFICATIONS = {
    "MAX_NOTIFICATIONS_PER_HOUR": _env_int("SMART_NOTIFICATIONS_MAX_PER_HOUR", 5),
    "MAX_NOTIFICATIONS_PER_DAY": _env_int("SMART_NOTIFICATIONS_MAX_PER_DAY", 20),
    "QUIET_HOURS": {
        "start": _env_int("SMART_NOTIFICATIONS_QUIET_HOURS_START", 22),
        "end": _env_int("SMART_NOTIFICATIONS_QUIET_HOURS_END", 7),
    },
    "BATCHING_WINDOW_MS": _env_int("SMART_NOTIFICATIONS_BATCHING_WINDOW_MS", 300_000),
    "SCHEDULED_CHECK_INTERVAL_SECONDS": _env_int(
        "SMART_NOTIFICATIONS_SCHEDULED_CHECK_SECONDS", 60
    ),
    "SMS_ENABLED": _env_bool("SMART_NOTIFICATIONS_SMS_ENABLED", False),
    "BATCH_LOW_PRIORITY": _env_bool("SMART_NOTIFICATIONS_BATCH_LOW_PRIORITY", True),
    "PROFILE_HISTORY_DAYS": _env_int("SMART_NOTIFICATIONS_PROFILE_HISTORY_DAYS", 180),
    "PATTERN_HISTORY_DAYS": _env_int("SMART_NOTIFICATIONS_PATTERN_HISTORY_DAYS", 90),
}

SMART_NOTIFICATION_STATE_REFRESH_SECONDS = _env_int(
    "SMART_NOTIFICATIONS_STATE_REFRESH_SECONDS", 3600
)

TEST_MODE = False
