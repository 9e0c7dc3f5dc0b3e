import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASS", ""),
    "database": os.getenv("DB_NAME", "hrms"),
}
# Requests beyond DB_POOL_SIZE concurrent connections wait up to DB_POOL_WAIT_SECONDS, then fail
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_POOL_WAIT_SECONDS = float(os.getenv("DB_POOL_WAIT_SECONDS", "2"))
DB_TIME_ZONE = os.getenv("DB_TIME_ZONE", "+08:00")

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Manila")

REPORT_PAGE_SIZE = int(os.getenv("REPORT_PAGE_SIZE", "10"))
RECENT_SHIFTS_LIMIT = int(os.getenv("RECENT_SHIFTS_LIMIT", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = False
SESSION_COOKIE_SECURE = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
