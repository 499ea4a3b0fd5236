"""
Inventory Engine Logging Configuration
Console and rotating-file logging for the ledger, costing and workflow areas
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from .config import settings

ROOT_LOGGER = "inventory"

# Child loggers for each area of the engine
MODULE_LOGGERS = ("ledger", "costing", "workflow", "events", "api", "database")

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MB = 1024 * 1024


def _rotating_handler(
    path: Path,
    level: int,
    formatter: logging.Formatter,
    max_mb: int = 5,
    backups: int = 3
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_mb * MB, backupCount=backups, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_to_file: Optional[bool] = None,
    log_to_console: bool = True
) -> logging.Logger:
    """
    Configure the ``inventory`` logger tree.

    Postings, cost refreshes and workflow transitions log under children of
    ``inventory``. File output writes a combined log, an error-only log and
    one file per engine area under ``settings.LOG_DIR``.

    Args:
        log_level: Level name, defaults to settings.LOG_LEVEL
        log_to_file: Enable file handlers, defaults to settings.LOG_TO_FILE
        log_to_console: Attach a stdout handler

    Returns:
        The root ``inventory`` logger
    """
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)
    if log_to_file is None:
        log_to_file = settings.LOG_TO_FILE

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.handlers.clear()

    file_formatter = logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT)

    if log_to_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(console)

    log_dir = None
    if log_to_file:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(exist_ok=True, parents=True)
        root.addHandler(_rotating_handler(log_dir / settings.LOG_FILE, level, file_formatter, max_mb=10, backups=5))
        root.addHandler(_rotating_handler(log_dir / settings.ERROR_LOG_FILE, logging.ERROR, file_formatter))

    setup_module_loggers(level, file_formatter, log_dir)
    return root


def setup_module_loggers(
    level: int,
    file_formatter: logging.Formatter,
    log_dir: Optional[Path] = None
):
    """Reset each engine area logger, adding its own file when logging to disk"""
    for name in MODULE_LOGGERS:
        area = get_logger(name)
        area.setLevel(level)
        area.handlers.clear()
        if log_dir:
            area.addHandler(_rotating_handler(log_dir / f"{name}.log", level, file_formatter))


def get_logger(name: str) -> logging.Logger:
    """Logger for one area of the engine, e.g. ``get_logger("ledger")``"""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


__all__ = [
    'setup_logging',
    'setup_module_loggers',
    'get_logger',
    'MODULE_LOGGERS',
]
