"""
Django settings for sitefeed project.

Values are read from environment variables so the same module serves local
development, tests and deployments.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name: str, default: bool = False) -> bool:
    return os.environ.get(name, str(default)).lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-sitefeed-development-key")

DEBUG = env_bool("DJANGO_DEBUG", False)

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "djangoql",
    "import_export",
    "django_q",
    "core",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "sitefeed.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "sitefeed.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("SITEFEED_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

LOGIN_URL = "admin:login"

# Completion service (OpenAI-compatible chat completions, OpenRouter by default)
SITEFEED_AI_API_URL = os.environ.get("SITEFEED_AI_API_URL", "https://openrouter.ai/api/v1")
SITEFEED_AI_API_KEY = os.environ.get("OPENROUTER_API_KEY", "")
SITEFEED_AI_MODEL = os.environ.get("SITEFEED_AI_MODEL", "google/gemini-2.5-flash")
SITEFEED_AI_MAX_TOKENS = int(os.environ.get("SITEFEED_AI_MAX_TOKENS", "4096"))
SITEFEED_AI_REQUEST_TIMEOUT = int(os.environ.get("SITEFEED_AI_REQUEST_TIMEOUT", "120"))
SITEFEED_AI_MAX_RETRIES = int(os.environ.get("SITEFEED_AI_MAX_RETRIES", "3"))
SITEFEED_AI_RETRY_DELAY = int(os.environ.get("SITEFEED_AI_RETRY_DELAY", "2"))
SITEFEED_AI_MAX_RETRY_TIME = int(os.environ.get("SITEFEED_AI_MAX_RETRY_TIME", "60"))
SITEFEED_AI_APP_TITLE = os.environ.get("SITEFEED_AI_APP_TITLE", "Website Feed Generator")

# Scraping
SITEFEED_FETCH_TIMEOUT = int(os.environ.get("SITEFEED_FETCH_TIMEOUT", "30"))
SITEFEED_SCRAPE_CRON = os.environ.get("SITEFEED_SCRAPE_CRON", "0 6 * * *")
SITEFEED_GLOBAL_GUID_UPSERT = env_bool("SITEFEED_GLOBAL_GUID_UPSERT", False)

Q_CLUSTER = {
    "name": "sitefeed",
    "orm": "default",
    "workers": int(os.environ.get("SITEFEED_Q_WORKERS", "2")),
    "timeout": 600,
    "retry": 900,
    "catch_up": False,
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "core": {
            "handlers": ["console"],
            "level": os.environ.get("SITEFEED_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "django_q": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    },
}

# Days to keep articles; 0 disables the cleanup schedule
SITEFEED_ARTICLE_RETENTION_DAYS = int(os.environ.get("SITEFEED_ARTICLE_RETENTION_DAYS", "0"))
