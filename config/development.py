import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "crew_board"),
}

DEBUG = True

# Shared password of the manager account
MANAGER_PASSWORD = os.getenv("MANAGER_PASSWORD", "admin1234")

# Spreadsheet script endpoints; empty disables the feature
LEGACY_CLOCK_URL = os.getenv("LEGACY_CLOCK_URL", "")
SHEET_API_URL = os.getenv("SHEET_API_URL", "")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE", "logs/crew_board.log")

REMEMBER_COOKIE_DAYS = int(os.getenv("REMEMBER_COOKIE_DAYS", "30"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
