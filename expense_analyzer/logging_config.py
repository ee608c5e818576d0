import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import List, Optional


APP_LOGGER_NAME = "expense_analyzer"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log more than an API operator needs by default
THIRD_PARTY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "sqlalchemy.dialects",
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "alembic",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "faker",
)


def _parse_level(value: Optional[str], default: int) -> int:
    """Map a level name such as "debug" to its logging constant, falling back to ``default``."""
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def _build_handlers(level: int, log_file: Optional[str], max_file_size: int, backup_count: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count
        ))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    app_log_level: Optional[str] = None,
    third_party_log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the ``expense_analyzer`` logger tree.

    Arguments left as None fall back to APP_LOG_LEVEL, THIRD_PARTY_LOG_LEVEL
    and LOG_FILE from the environment. Safe to call more than once.

    Args:
        app_log_level: Level for application logs (default: INFO)
        third_party_log_level: Level for SQLAlchemy, uvicorn and friends (default: WARNING)
        log_file: Also write to this rotating file when set
        max_file_size: Rotate the log file after this many bytes
        backup_count: Number of rotated files to keep

    Returns:
        The application root logger
    """
    app_level = _parse_level(app_log_level or os.getenv("APP_LOG_LEVEL"), logging.INFO)
    third_party_level = _parse_level(third_party_log_level or os.getenv("THIRD_PARTY_LOG_LEVEL"), logging.WARNING)
    log_file = log_file or os.getenv("LOG_FILE")

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(app_level)

    # Repeated calls (reload, tests) must not stack handlers
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    for handler in _build_handlers(app_level, log_file, max_file_size, backup_count):
        app_logger.addHandler(handler)
    app_logger.propagate = False

    for logger_name in THIRD_PARTY_LOGGERS:
        logging.getLogger(logger_name).setLevel(third_party_level)

    return app_logger


def get_logger(name: str = APP_LOGGER_NAME) -> logging.Logger:
    """Logger for ``name`` placed under the application namespace."""
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
