import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module, defaulting to development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "card_attendance.config.production"

    if env in {"test", "testing"}:
        return "card_attendance.config.testing"

    return "card_attendance.config.development"
