from __future__ import annotations

import importlib

from school_attendance.common.logging_utils import setup_logger
from school_attendance.config import get_settings_module
from school_attendance.database.bootstrap import apply_schema, list_tables


def main() -> None:
    logger = setup_logger()
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
