"""
Logging setup for the ``ascend`` logger tree.

Dev: readable lines on stdout.
Prod: JSON lines on stdout plus a rotating file at ``settings.log_file``.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

from ascend.config import Settings

LOGGER_NAME = "ascend"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _json_formatter(settings: Settings) -> logging.Formatter:
    return JsonFormatter(
        JSON_FORMAT,
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
        static_fields={"app": "ascend-goal-tracker", "env": settings.env},
    )


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Configure the application logger. Call once at startup; calling again
    replaces the handlers instead of stacking them.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    if settings.is_production:
        console.setFormatter(_json_formatter(settings))
    else:
        console.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(console)

    if settings.is_production:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5)
        file_handler.setFormatter(_json_formatter(settings))
        logger.addHandler(file_handler)

    # Reduce third-party noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger.info("logging_configured", extra={"log_level": logging.getLevelName(level), "env": settings.env})
    return logger
