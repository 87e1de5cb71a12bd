"""
Event Dispatcher – Django Settings (Development & Tests)
==========================================================
Django serves as the container for the event_dispatcher app.
Only the pieces the app needs are configured here.
"""

from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
# Development only. Never deploy with this key.
SECRET_KEY = "event-dispatcher-dev-key"

DEBUG = True

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "event_dispatcher",
]

# ── Database ──────────────────────────────────────────────────
# The dispatcher persists nothing; Django still expects a default.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Event Dispatcher ──────────────────────────────────────────
# Listeners declared here are loaded into the default registry
# when the app is ready.
EVENT_DISPATCHER = {
    "RESOLVER": "event_dispatcher.resolver.ImportStringResolver",
    "AUTOLOAD": True,
    "LISTENERS": [],
    "SUBSCRIBERS": [],
}

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {"class": "logging.StreamHandler"},
    },
    "loggers": {
        "event_dispatcher": {
            "handlers": ["console"],
            "level": "INFO",
        },
    },
}
