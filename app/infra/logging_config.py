"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from app.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "chatline"


class LoggingConfig:
    """Configure the root logger once from settings.log_level."""

    _configured = False

    def __init__(self, level: Optional[str] = None) -> None:
        if LoggingConfig._configured:
            return
        level_name = (level or get_settings().log_level).upper()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root = logging.getLogger()
        root.setLevel(getattr(logging, level_name, logging.INFO))
        root.addHandler(handler)
        # SQL echo is noise at INFO
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        LoggingConfig._configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
