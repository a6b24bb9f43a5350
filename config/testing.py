import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lab_presence_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ROSTER_FILE = None

STORAGE_RECOVERY = "abort"
VERIFY_LEDGER_ON_STARTUP = False

INSIDE_WINDOW_HOURS = 24
HISTORY_LIMIT = 100
MAX_HISTORY_LIMIT = 500
TOGGLE_MAX_ATTEMPTS = 3
