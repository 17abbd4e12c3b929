import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "card_attendance"),
}

# Left empty on purpose when unset: device endpoints then refuse every call
DEVICE_API_KEY = os.getenv("DEVICE_API_KEY", "")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

PENDING_CARD_TTL_MINUTES = int(os.getenv("PENDING_CARD_TTL_MINUTES", "5"))
ADMIN_SESSION_DAYS = int(os.getenv("ADMIN_SESSION_DAYS", "7"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
