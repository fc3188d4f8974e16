"""
Django settings for the trivia board backend.

Deployment values are read from the environment; everything else is fixed
here. Game state lives in process memory only, so no database is configured.
"""
import os

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-insecure-trivia-board-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "true").lower() in ("1", "true", "yes")
ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if h]

# contenttypes and auth are kept only because DRF and drf-yasg import their
# modules; this project defines no models and runs without a database.
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django.contrib.staticfiles",
    "rest_framework",
    "drf_yasg",
    "trivia",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "config.urls"

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

WSGI_APPLICATION = "config.wsgi.application"

# Games live in process memory. With no database Django uses its dummy
# backend, and runserver skips the migration check.
DATABASES = {}

USE_TZ = True
TIME_ZONE = "UTC"

STATIC_URL = "static/"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

SWAGGER_SETTINGS = {
    "USE_SESSION_AUTH": False,
    "SECURITY_DEFINITIONS": {},
}

TRIVIA_BOARD = {
    "API_BASE_URL": os.environ.get("TRIVIA_API_BASE_URL", "https://jservice.io/api"),
    "CATEGORY_COUNT": 6,
    "CLUES_PER_CATEGORY": 5,
    "CATEGORY_POOL_SIZE": 100,
    "REQUEST_TIMEOUT": 10.0,
    "PLACEHOLDER": "?",
    "MAX_GAMES": 1000,
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "trivia": {
            "handlers": ["console"],
            "level": os.environ.get("TRIVIA_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
