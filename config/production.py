import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "lab_presence"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lab_presence"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "3000"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ROSTER_FILE = os.getenv("ROSTER_FILE") or None

STORAGE_RECOVERY = os.getenv("STORAGE_RECOVERY", "abort")
VERIFY_LEDGER_ON_STARTUP = bool(int(os.getenv("VERIFY_LEDGER_ON_STARTUP", "0")))

INSIDE_WINDOW_HOURS = float(os.getenv("INSIDE_WINDOW_HOURS", "24"))
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "100"))
MAX_HISTORY_LIMIT = int(os.getenv("MAX_HISTORY_LIMIT", "500"))
TOGGLE_MAX_ATTEMPTS = int(os.getenv("TOGGLE_MAX_ATTEMPTS", "3"))
