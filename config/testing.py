import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASS", ""),
    "database": os.getenv("DB_NAME", "hrms_test"),
}
DB_POOL_SIZE = 2
DB_POOL_WAIT_SECONDS = 0.5
DB_TIME_ZONE = None

APP_TIMEZONE = "Asia/Manila"

REPORT_PAGE_SIZE = 10
RECENT_SHIFTS_LIMIT = 5

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True
SESSION_COOKIE_SECURE = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
