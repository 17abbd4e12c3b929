from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .core.constants import DEFAULT_SESSION_DAYS
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_admin, list_tables

from .admins.controller import register as register_admins
from .attendance.controller import register as register_attendance
from .cards.controller import register as register_cards
from .events.controller import register as register_events
from .registrations.controller import register as register_registrations
from .students.controller import register as register_students

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Application factory.

    Without ``container`` the MySQL-backed container is built from settings;
    tests pass one assembled over in-memory repositories.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ADMIN_SESSION_DAYS"] = int(getattr(settings, "ADMIN_SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.permanent_session_lifetime = timedelta(days=app.config["ADMIN_SESSION_DAYS"])
    app.config["MAX_CONTENT_LENGTH"] = 10 * 1024 * 1024

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_admin(db_config)

        container = build_container(
            db_config=db_config,
            device_api_key=getattr(settings, "DEVICE_API_KEY", ""),
            pending_card_ttl_minutes=int(getattr(settings, "PENDING_CARD_TTL_MINUTES", 5)),
        )

    app.extensions["card_attendance"] = container

    register_admins(app, container)
    register_students(app, container)
    register_cards(app, container)
    register_events(app, container)
    register_registrations(app, container)
    register_attendance(app, container)

    logger.info("App ready (settings=%s)", settings_module)
    return app
