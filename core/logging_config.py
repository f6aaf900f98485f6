# core/logging_config.py

import logging
import os
from datetime import datetime
from logging import Formatter, Logger, StreamHandler
from logging.handlers import TimedRotatingFileHandler

from colorlog import ColoredFormatter
from pythonjsonlogger.json import JsonFormatter

APPLICATION_NAME = os.getenv("APP_NAME", "Storefront Admin ACL API").replace(" ", "_")
APP_ENV = os.getenv("APP_ENV", "local").lower()  # "local" or "cloud"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()
LOG_DIR = os.getenv("LOG_DIR", "logs")
os.makedirs(LOG_DIR, exist_ok=True)

AUDIT_LOGGER_NAME = "acl.audit"

# Structured fields attached to audit records through ``extra=``
AUDIT_FIELDS = ("event", "actor_id", "role_id", "user_id", "verified_by", "privilege_count")


def _log_file(kind: str) -> str:
    return os.path.join(
        LOG_DIR, f"{APPLICATION_NAME}_{kind}_{datetime.now().strftime('%Y%m%d')}.log"
    )


def _rotating_handler(kind: str, backup_count: int = 7) -> TimedRotatingFileHandler:
    return TimedRotatingFileHandler(
        filename=_log_file(kind), when="midnight", backupCount=backup_count, encoding="utf-8"
    )


def _json_formatter(*extra_fields: str) -> JsonFormatter:
    fields = ["asctime", "levelname", "name", "message", "filename", "lineno", *extra_fields]
    return JsonFormatter(
        " ".join(f"%({field})s" for field in fields),
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _console_formatter() -> Formatter:
    if APP_ENV != "local":
        return _json_formatter()
    return ColoredFormatter(
        "%(log_color)s%(asctime)s | %(levelname)-8s | %(name)s | "
        "%(filename)s:%(lineno)d | %(message)s%(reset)s",
        datefmt="%H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        },
    )


def setup_logging() -> None:
    """Root logging for third-party libraries (uvicorn, sqlalchemy)."""
    file_handler = _rotating_handler("root")
    file_handler.setFormatter(_json_formatter())

    console_handler = StreamHandler()
    console_handler.setFormatter(_console_formatter())

    logging.basicConfig(
        level=logging.DEBUG if APP_ENV == "local" else logging.INFO,
        handlers=[file_handler, console_handler],
    )

    # SQL echo is controlled by settings.DEBUG on the engine
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").disabled = True

    logging.info(f"Logging initialized for environment: {APP_ENV.upper()}")


def get_logger(name: str) -> Logger:
    """Module logger writing to the console and the daily application log."""
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL, logging.DEBUG))

    console_handler = StreamHandler()
    console_handler.setFormatter(_console_formatter())

    file_handler = _rotating_handler("app")
    file_handler.setFormatter(_json_formatter())

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)
    logger.propagate = False

    return logger


def get_audit_logger() -> Logger:
    """
    Logger for privilege changes: role creation, role saves and admin users.

    Records go to their own JSON file, kept for 90 days, with the
    ``AUDIT_FIELDS`` passed through ``extra=`` as top-level keys.
    """
    logger = logging.getLogger(AUDIT_LOGGER_NAME)

    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    file_handler = _rotating_handler("audit", backup_count=90)
    file_handler.setFormatter(_json_formatter(*AUDIT_FIELDS))
    logger.addHandler(file_handler)
    logger.propagate = False

    return logger
