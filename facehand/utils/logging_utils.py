"""
Logging utilities for the detection pipeline.

Every module logs under the ``facehand`` package logger, which is
configured once from ``LOGGING_CONFIG``.
"""

import functools
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "facehand"


class LoggerFactory:
    """Configures the package logger on first use."""

    _initialized: bool = False

    @classmethod
    def setup(cls) -> None:
        """
        Attach a console handler (and a file handler when ``file_logging``
        is set) to the package logger. The root logger is left to the host.
        """
        from ..config import LOGGING_CONFIG

        level = logging.getLevelName(str(LOGGING_CONFIG["level"]).upper())
        if not isinstance(level, int):
            level = logging.INFO
        log_format = LOGGING_CONFIG["format"]

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(level)
        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(LevelColorFormatter(log_format))
        package_logger.addHandler(console_handler)

        if LOGGING_CONFIG["file_logging"]:
            log_dir = Path(LOGGING_CONFIG["log_dir"])
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            file_handler = logging.FileHandler(log_dir / f"facehand_{timestamp}.log",
                                               encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(log_format))
            package_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._initialized:
            cls.setup()
        return logging.getLogger(name)


class LevelColorFormatter(logging.Formatter):
    """Colors the level name for terminal output."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        # Copy so other handlers still see a plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def log_execution_time(logger: Optional[logging.Logger] = None):
    """
    Log how long each call takes, in milliseconds, at debug level.

    Failures are logged as errors and re-raised.

    Example:
        @log_execution_time()
        def process_frame(self, frame, context):
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            nonlocal logger
            if logger is None:
                logger = LoggerFactory.get_logger(func.__module__)

            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                logger.error(f"{func.__name__} failed after {elapsed_ms:.2f}ms: {e}")
                raise
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(f"{func.__name__} completed in {elapsed_ms:.2f}ms")
            return result

        return wrapper
    return decorator


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the configured package logger."""
    return LoggerFactory.get_logger(name)
