# Test settings override: isolate caches and mail, keep throttling as in base settings.
from .settings import *  # noqa

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# In-memory cache to avoid cross-test pollution (throttle history, etc.)
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "test-cache",
        "KEY_PREFIX": "tests",
    }
}

# Speed up tests
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

BOOKING_ADMIN_EMAIL = "admin-desk@example.com"
BOOKING_BLOCK_CONFLICTING_CONFIRM = True
# Send mail inline on commit so mail.outbox is filled when the request returns.
BOOKING_EMAIL_ASYNC = False
# Open around the clock unless a test stores working_hours_* rows.
BOOKING_WORKING_HOURS_START = "00:00"
BOOKING_WORKING_HOURS_END = "00:00"
AUTH_COOKIE_SECURE = False

# IMPORTANT:
# Do NOT override REST_FRAMEWORK here.
# Throttling classes/rates stay exactly as in base settings.

# Let pytest's caplog (a root handler) see application records.
LOGGING["loggers"]["src"]["propagate"] = True
