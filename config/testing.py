import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "crew_board_test"),
}

DEBUG = False
TESTING = True

MANAGER_PASSWORD = "test-manager"

LEGACY_CLOCK_URL = ""
SHEET_API_URL = ""
HTTP_TIMEOUT_SECONDS = 5.0

LOG_LEVEL = "WARNING"
LOG_FILE = None

REMEMBER_COOKIE_DAYS = 30

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
