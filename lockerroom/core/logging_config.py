"""
Logging Configuration Module.

Central logging setup for the LockerRoom server. Every module obtains its
logger through :func:`get_logger`; :func:`setup_logging` installs the
handlers once at startup.

Environment:
- ``LOCKERROOM_LOG_LEVEL``: console level (via the server settings)
- ``LOG_FORMAT``: ``simple``, ``detailed`` (default) or ``json``
- ``ENABLE_FILE_LOGGING`` / ``LOG_FILE_DIR``: also write ``lockerroom.log``
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

LOG_FILE_NAME = "lockerroom.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _configured_level() -> str:
    # Settings import is deferred so config can itself log without a cycle
    try:
        from lockerroom.server.core.config import settings

        return settings.log_level.upper()
    except Exception:
        return os.getenv("LOCKERROOM_LOG_LEVEL", "INFO").upper()


LOG_LEVEL = _configured_level()
LOG_FORMAT = os.getenv("LOG_FORMAT", "detailed")
LOG_FILE_DIR = os.getenv("LOG_FILE_DIR", "logs")
ENABLE_FILE_LOGGING = _env_flag("ENABLE_FILE_LOGGING")


SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

LOG_FORMATS: Dict[str, str] = {
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
    "json": JSON_FORMAT,
}

# Levels applied per logger after the handlers are installed
MODULE_LOG_LEVELS = {
    "lockerroom.core": "INFO",
    "lockerroom.core.database": "INFO",
    "lockerroom.server": "INFO",
    "lockerroom.server.api": "DEBUG",
    "lockerroom.server.services": "DEBUG",
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "asyncpg": "WARNING",
    "httpx": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Install console (and optionally file) handlers on the root logger.

    Calling it again replaces the previous handlers.

    Args:
        log_level: Console level; defaults to ``LOCKERROOM_LOG_LEVEL``
        log_format: ``simple``, ``detailed`` or ``json``; unknown names fall back to detailed
        enable_file: Add the file handler when ``ENABLE_FILE_LOGGING`` is on
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(LOG_FORMATS.get(fmt, DETAILED_FORMAT), datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    # Handlers filter; the root passes everything through
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    to_file = enable_file and ENABLE_FILE_LOGGING
    if to_file:
        log_dir = Path(LOG_FILE_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={to_file}")


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` (pass ``__name__``)."""
    return logging.getLogger(name)


setup_logging()
