"""Centralized logging configuration for gitcontrib.

Human-readable logs go to stderr so they never interleave with chart output
on stdout. A rotating JSON log file can be enabled for troubleshooting.
"""

import copy
import logging
import logging.config
import os
from typing import Any


# Default logging configuration
LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
        "console": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "gitcontrib": {
            "level": "DEBUG",
            "handlers": ["console"],
            "propagate": False,
        },
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"],
    },
}


def setup_logging(
    json_output: bool = False, log_level: str = "WARNING", log_file: str | None = None
) -> None:
    """Configure logging for the application.

    Args:
        json_output: If True, use JSON formatter for console output
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a rotating JSON log file (DEBUG and above)
    """
    config = copy.deepcopy(LOGGING_CONFIG)

    # Override console formatter if JSON output requested
    if json_output:
        config["handlers"]["console"]["formatter"] = "json"

    # Override log level if specified
    if log_level:
        config["handlers"]["console"]["level"] = log_level.upper()
        config["loggers"]["gitcontrib"]["level"] = log_level.upper()

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        config["handlers"]["json_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "json",
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
        }
        config["loggers"]["gitcontrib"]["handlers"].append("json_file")
        config["loggers"]["gitcontrib"]["level"] = "DEBUG"

    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance

    Example:
        logger = get_logger(__name__)
        logger.info("Rendering chart", extra={"mode": "stacked", "labels": 12})
    """
    return logging.getLogger(name)
