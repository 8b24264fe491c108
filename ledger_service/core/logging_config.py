"""
Logging configuration for the ledger service.

Console output always, plus a rotating log file when LOG_FILE is set.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from ledger_service.core.config import settings

SERVICE_LOGGER = "ledger_service"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5


def _level_from_name(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(level_name: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure root + service loggers.

    Safe to call more than once: existing service handlers are replaced.
    """
    level = _level_from_name(level_name or settings.LOG_LEVEL)
    log_file = log_file or settings.LOG_FILE
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    logger = logging.getLogger(SERVICE_LOGGER)
    logger.setLevel(level)
    # Avoid duplicate handlers if setup_logging is called multiple times
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # SQL echo is controlled by DB_ECHO; keep the engine logger quiet otherwise
    if not settings.DB_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logger
