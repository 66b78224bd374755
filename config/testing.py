import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "taskora_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

LOG_LEVEL = "WARNING"
LOG_FILE = ""

SESSION_DAYS = 1
LATE_THRESHOLD_HOUR = 10
AUTOSAVE_DELAY_SECONDS = 0.05

STORAGE_DIR = os.getenv("STORAGE_DIR", "storage-test")
SIGNED_URL_TTL_SECONDS = 60
MAX_UPLOAD_BYTES = 1024 * 1024

CHAT_API_URL = ""
CHAT_API_KEY = ""
CHAT_MODEL = "test-model"
CHAT_TIMEOUT_SECONDS = 5.0
