"""
Logging configuration for the Stockwise analytics service.

Level, format and log file come from arguments or, when omitted, from
STOCKWISE_LOG_LEVEL, STOCKWISE_LOG_FORMAT ("text" or "json") and
STOCKWISE_LOG_FILE.
"""

import logging
import logging.handlers
import json
import sys
from typing import Optional
from datetime import datetime, timezone
import os

ROOT_LOGGER_NAME = "stockwise"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).replace(tzinfo=None).isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # logger.info(..., extra={"extra_fields": {...}})
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            entry.update(extra_fields)

        return json.dumps(entry, default=str)


def _formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _file_handler(log_file: str) -> logging.Handler:
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    return logging.handlers.RotatingFileHandler(log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS)


def setup_logging(
    log_file: Optional[str] = None,
    log_level: Optional[str] = None,
    console_output: bool = True,
    json_format: Optional[bool] = None
) -> logging.Logger:
    """
    Configure the service root logger, replacing any handlers it already has.

    Args:
        log_file: Rotating log file path (default: STOCKWISE_LOG_FILE, else none)
        log_level: Level name (default: STOCKWISE_LOG_LEVEL, else INFO)
        console_output: Whether to log to stdout
        json_format: Emit JSON lines (default: STOCKWISE_LOG_FORMAT == "json")

    Returns:
        Configured root logger for the service
    """
    level_name = (log_level or os.getenv("STOCKWISE_LOG_LEVEL") or "INFO").upper()
    if json_format is None:
        json_format = os.getenv("STOCKWISE_LOG_FORMAT", "text").lower() == "json"
    log_file = log_file or os.getenv("STOCKWISE_LOG_FILE") or None

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = []
    if console_output:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        handlers.append(_file_handler(log_file))

    formatter = _formatter(json_format)
    for handler in handlers:
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a component, e.g. get_logger("engine") -> stockwise.engine."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)
