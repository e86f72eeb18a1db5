from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .academics.controller import register as register_academics
from .attendance.controller import register as register_attendance
from .common import web
from .common.logging_utils import setup_logger
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .lessons.controller import register as register_lessons
from .reports.controller import register as register_reports
from .system.controller import register as register_system
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory.

    Pass a ready ``container`` (e.g. in-memory repositories in tests) to skip
    the database bootstrap.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logger(level=getattr(settings, "LOG_LEVEL", "INFO"), log_file=getattr(settings, "LOG_FILE", None))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config)
            ensure_demo_users(db_config)
            logger.info("Demo seed ready")

        container = build_container(db_config=db_config)

    app.extensions["container"] = container
    web.install(app, container.auth_service)

    register_users(app, container)
    register_academics(app, container)
    register_lessons(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_system(app, container)

    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=app.config["DEBUG"])


if __name__ == "__main__":
    main()
