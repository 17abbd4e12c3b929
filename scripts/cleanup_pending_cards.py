from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from card_attendance.common.datetime_utils import now_utc
from card_attendance.config import get_settings_module
from card_attendance.container import build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        device_api_key=getattr(settings, "DEVICE_API_KEY", ""),
        pending_card_ttl_minutes=int(getattr(settings, "PENDING_CARD_TTL_MINUTES", 5)),
    )
    removed = container.card_service.cleanup_expired(now=now_utc())
    print(f"OK: removed {removed} expired pending card(s)")


if __name__ == "__main__":
    main()
