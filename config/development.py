import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lab_presence"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
PORT = int(os.getenv("PORT", "3000"))

# Apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Provision the roster on startup (insert-if-absent, safe on restart)
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
ROSTER_FILE = os.getenv("ROSTER_FILE") or None

# abort: refuse to start on a failed integrity check. reset: rebuild empty + re-provision.
STORAGE_RECOVERY = os.getenv("STORAGE_RECOVERY", "abort")
VERIFY_LEDGER_ON_STARTUP = bool(int(os.getenv("VERIFY_LEDGER_ON_STARTUP", "1")))

INSIDE_WINDOW_HOURS = float(os.getenv("INSIDE_WINDOW_HOURS", "24"))
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "100"))
MAX_HISTORY_LIMIT = int(os.getenv("MAX_HISTORY_LIMIT", "500"))
TOGGLE_MAX_ATTEMPTS = int(os.getenv("TOGGLE_MAX_ATTEMPTS", "3"))
