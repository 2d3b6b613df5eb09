"""Logging setup for the installer service.

Every module logs through a child of the ``fwinstaller`` logger
(``fwinstaller.session``, ``fwinstaller.launcher``, ...), so configuring the
root package logger once at startup covers the worker thread as well.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

from fwinstaller.config import InstallerConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(threadName)s): %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def setup_logger(
    name: str = "fwinstaller",
    log_file: str = "./logs/fwinstaller.log",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 3,
    level: int = logging.INFO,
    console: bool = True,
    handler_level: Optional[int] = None,
) -> logging.Logger:
    """Attach a rotating file handler (and optionally a console handler).

    Args:
        name: Logger name
        log_file: Path to log file, parent directories are created
        max_bytes: Max size before rotation
        backup_count: Number of rotated files to keep
        level: Logging level
        console: Also log to stderr
        handler_level: Handler threshold (defaults to level); lower it when
            child loggers are allowed to be more verbose than the package

    Returns:
        Configured logger instance
    """
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler_level = level if handler_level is None else handler_level

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(handler_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(handler_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def module_loggers(module_levels: Dict[str, str]) -> Dict[str, int]:
    """Map short module names ('progress', 'launcher') to logger names and levels."""
    resolved = {}
    for name, level in module_levels.items():
        logger_name = name if name.startswith("fwinstaller") else f"fwinstaller.{name}"
        resolved[logger_name] = getattr(logging, level)
    return resolved


def configure_logging(config: InstallerConfig) -> logging.Logger:
    """Configure the package logger from installer settings.

    The worker thread reports progress at DEBUG on every extracted member,
    so per-module overrides let ``progress``/``session`` stay quiet (or
    verbose) independently of the rest of the service.
    """
    overrides = module_loggers(config.module_levels)
    lowest = min([config.logging_level, *overrides.values()])

    logger = setup_logger(
        "fwinstaller",
        config.log_file,
        level=config.logging_level,
        handler_level=lowest,
    )
    for name, level in overrides.items():
        logging.getLogger(name).setLevel(level)
    return logger
