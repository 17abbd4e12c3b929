from __future__ import annotations

import argparse
import importlib

from dotenv import load_dotenv

from card_attendance.config import get_settings_module
from card_attendance.database.bootstrap import apply_schema, ensure_demo_admin, list_tables


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the card attendance schema")
    parser.add_argument("--seed-admin", action="store_true", help="create the demo admin account if missing")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    if args.seed_admin or getattr(settings, "AUTO_SEED_DB", False):
        ensure_demo_admin(db_config)

    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
