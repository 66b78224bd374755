"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_LATE_THRESHOLD_HOUR = 10
DEFAULT_AUTOSAVE_DELAY_SECONDS = 3.0
DEFAULT_SIGNED_URL_TTL_SECONDS = 3600
DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024
MIN_PASSWORD_LENGTH = 8
LOGIN_PATH = "/login"
