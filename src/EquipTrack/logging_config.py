"""
Logging configuration for EquipTrack.

This module sets up application-wide logging with both file and console output.
Different modules can get their own loggers while sharing the same configuration.
"""

import logging
import os
from datetime import datetime
from logging.handlers import RotatingFileHandler


# Log format - includes timestamp, logger name, level, and message
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

AUDIT_LOGGER_NAME = "audit"


def _rotating_handler(path, level, backup_count=5):
    handler = RotatingFileHandler(
        path,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(log_level=logging.INFO, logs_dir="logs"):
    """
    Set up application-wide logging configuration.

    This creates handlers for:
    - Console output (INFO and above)
    - General application log file (INFO and above)
    - Error log file (ERROR and above)

    Args:
        log_level: Minimum level to log, as an int or a level name
        logs_dir: Directory for the rotating log files (created if missing)
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())

    os.makedirs(logs_dir, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # Console handler - shows INFO and above
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    app_file_handler = _rotating_handler(os.path.join(logs_dir, "app.log"), logging.INFO)
    error_file_handler = _rotating_handler(os.path.join(logs_dir, "errors.log"), logging.ERROR)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    root_logger.addHandler(console_handler)
    root_logger.addHandler(app_file_handler)
    root_logger.addHandler(error_file_handler)

    root_logger.info("=" * 80)
    root_logger.info(f"EquipTrack Started - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    root_logger.info(f"Log Level: {logging.getLevelName(log_level)}")
    root_logger.info(f"Logs Directory: {os.path.abspath(logs_dir)}")
    root_logger.info("=" * 80)


def get_logger(name):
    """
    Get a logger for a specific module.

    Args:
        name: Name for the logger (typically __name__ of the module)

    Returns:
        Logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("This is an info message")
    """
    return logging.getLogger(name)


def get_audit_logger():
    """Logger for change-log events. Unconfigured until setup_audit_logger()."""
    return logging.getLogger(AUDIT_LOGGER_NAME)


def setup_audit_logger(logs_dir="logs"):
    """
    Set up a separate logger for change-log (audit trail) events.

    Every appended change-log entry is mirrored here so the history of the
    collection can be read without opening the database.

    Returns:
        Logger instance for audit events
    """
    os.makedirs(logs_dir, exist_ok=True)

    logger = get_audit_logger()
    logger.setLevel(logging.INFO)

    # Audit lines stay out of app.log
    logger.propagate = False
    logger.handlers.clear()

    # Keep more backups for the audit trail
    logger.addHandler(
        _rotating_handler(os.path.join(logs_dir, "audit.log"), logging.INFO, backup_count=10)
    )

    logger.info("=" * 80)
    logger.info("Audit Logger Initialized")
    logger.info("=" * 80)

    return logger
