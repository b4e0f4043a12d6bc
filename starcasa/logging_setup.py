"""
Logging configuration for StarCasa.

Console output is kept short (time only); the daily log file gets every
record, including the verbose ones logged at DEBUG.
"""

import datetime
import logging
import os
import sys
import time
from typing import Optional

from .config import AppConfig, get_app_data_path

CONSOLE_FORMAT = '[%(asctime)s] %(message)s'
CONSOLE_DATEFMT = '%H:%M:%S'
FILE_FORMAT = '[%(asctime)s] %(message)s'
FILE_DATEFMT = '%Y-%m-%d %H:%M:%S'


def get_log_dir(config: AppConfig) -> str:
    """Directory the daily log files are written to."""
    return config.log_dir or os.path.join(get_app_data_path(), "Logs")


def get_log_file(log_dir: str, day: Optional[datetime.date] = None) -> str:
    """
    Get the log file for a given day.

    Args:
        log_dir: Directory holding the log files
        day: Day of the log, defaults to today

    Returns:
        Path of the form ``<log_dir>/log-YYYY-MM-DD.log``
    """
    day = day or datetime.date.today()
    return os.path.join(log_dir, f"log-{day.strftime('%Y-%m-%d')}.log")


def cleanup_old_logs(log_dir: str, retention_days: int) -> int:
    """
    Delete log files older than the retention window.

    Args:
        log_dir: Directory holding the log files
        retention_days: Files last modified more than this many days ago are removed

    Returns:
        Number of files deleted
    """
    if not os.path.isdir(log_dir):
        return 0

    cutoff = time.time() - retention_days * 86400
    deleted = 0
    for name in os.listdir(log_dir):
        if not name.endswith('.log'):
            continue
        path = os.path.join(log_dir, name)
        try:
            if os.path.getmtime(path) < cutoff:
                os.remove(path)
                deleted += 1
        except OSError as e:
            logging.getLogger(__name__).debug(f"Error deleting log file {path}: {str(e)}")
    return deleted


def setup_logging(config: AppConfig) -> str:
    """
    Configure logging based on settings.

    Args:
        config: Application configuration

    Returns:
        Path of the log file in use
    """
    console_level = logging.DEBUG if config.debug_mode else getattr(logging, config.log_level.upper(), logging.INFO)

    log_dir = get_log_dir(config)
    os.makedirs(log_dir, exist_ok=True)
    log_file = get_log_file(log_dir)

    root = logging.getLogger('')
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, CONSOLE_DATEFMT))
    root.addHandler(console)

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, FILE_DATEFMT))
    root.addHandler(file_handler)

    # Set level for third-party loggers to reduce noise
    logging.getLogger('PIL').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)

    cleanup_old_logs(log_dir, config.log_retention_days)

    if config.debug_mode:
        logging.debug("Debug mode enabled")
        logging.debug(f"Python version: {sys.version}")
        logging.debug(f"Platform: {sys.platform}")

    return log_file


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name: Name for the logger

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
