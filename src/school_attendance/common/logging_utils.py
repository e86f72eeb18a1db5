"""Logging setup shared by the app factory and scripts.

Console output always; a rotating file when ``log_file`` is given. Password
values that slip into messages are masked before output.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "school_attendance"


class SensitiveDataFilter(logging.Filter):
    """Mask ``password=...`` style fragments in log messages.

    Attached to the handlers so records from child loggers are masked too.
    """

    _pattern = re.compile(r'(password|pass|pwd)["\']?\s*[:=]\s*["\']?([^"\'\s,}]+)', re.IGNORECASE)

    def filter(self, record: logging.LogRecord) -> bool:
        # Mask the rendered message; values passed as args are covered too.
        record.msg = self._pattern.sub(r"\1: ********", record.getMessage())
        record.args = ()
        return True


def setup_logger(
    name: str = LOGGER_NAME,
    level: int | str = logging.INFO,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure and return the package logger.

    Module loggers (``logging.getLogger(__name__)``) are children of this
    logger, so they inherit its handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers when create_app() runs more than once
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(SensitiveDataFilter())
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(SensitiveDataFilter())
        logger.addHandler(file_handler)

    return logger
