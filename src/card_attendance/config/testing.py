import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "card_attendance_test"),
}

DEVICE_API_KEY = "test-device-key"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

PENDING_CARD_TTL_MINUTES = 5
ADMIN_SESSION_DAYS = 7

AUTO_INIT_DB = False
AUTO_SEED_DB = False
