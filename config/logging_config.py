"""Logging configuration for Nightscout Tray.

Provides structured logging with file rotation and optional debug output.
All components should use this logging system instead of print().

Usage:
    from config.logging_config import setup_logging, get_logger

    # Initialize at app startup
    setup_logging(data_dir=Path.home() / ".nightscout-tray")

    # Get logger in any module
    logger = get_logger(__name__)
    logger.info("Tray started")
    logger.error("Fetch failed", exc_info=True)
"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from config.constants import STORAGE


# Module-level logger cache
_loggers: dict = {}
_initialized: bool = False
_root_logger: Optional[logging.Logger] = None

ROOT_LOGGER_NAME = 'nstray'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class NightscoutTrayFormatter(logging.Formatter):
    """Custom formatter with color support for console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors and sys.stderr.isatty():
            color = self.COLORS.get(record.levelname, '')
            reset = self.COLORS['RESET']
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{reset}"
        return super().format(record)


def setup_logging(
    data_dir: Optional[Path] = None,
    debug: bool = False,
    console_output: bool = True,
    log_to_file: bool = True
) -> logging.Logger:
    """Initialize the logging system.

    Should be called once at application startup. Subsequent calls
    will reconfigure the existing logger.

    Args:
        data_dir: Directory for log files. Defaults to ~/.nightscout-tray/
        debug: Enable debug-level logging.
        console_output: Also log to stderr.
        log_to_file: Write logs to file with rotation.

    Returns:
        The root logger for the application.
    """
    global _initialized, _root_logger

    if data_dir is None:
        data_dir = Path.home() / STORAGE.DATA_DIR_NAME

    data_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Close handlers from a previous setup so rotated files are released
    for handler in list(root_logger.handlers):
        handler.close()
    root_logger.handlers.clear()

    if log_to_file:
        log_file = data_dir / STORAGE.LOG_FILE
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=STORAGE.LOG_MAX_BYTES,
            backupCount=STORAGE.LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
        console_handler.setFormatter(NightscoutTrayFormatter(use_colors=True))
        root_logger.addHandler(console_handler)

    root_logger.info(
        f"Logging initialized - level={'DEBUG' if debug else 'INFO'}, "
        f"file={log_to_file}, console={console_output}"
    )

    _initialized = True
    _root_logger = root_logger

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Returns a child logger of the root 'nstray' logger. If logging
    hasn't been initialized, creates a basic logger.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        A configured logger instance.
    """
    # Keep the last two dotted parts, e.g. "views.icons"
    short_name = name
    if '.' in name:
        parts = name.split('.')
        short_name = '.'.join(parts[-2:])

    if short_name not in _loggers:
        if not _initialized:
            logging.basicConfig(level=logging.INFO)

        _loggers[short_name] = logging.getLogger(f'{ROOT_LOGGER_NAME}.{short_name}')

    return _loggers[short_name]


def log_exception(logger: logging.Logger, message: str, exc: Exception) -> None:
    """Log an exception with full traceback and context.

    Args:
        logger: The logger to use.
        message: Descriptive message about what was happening.
        exc: The exception that was caught.
    """
    logger.error(
        f"{message}: {type(exc).__name__}: {exc}",
        exc_info=True,
        extra={'exception_type': type(exc).__name__}
    )


class LogContext:
    """Context manager for logging operation duration.

    Example:
        >>> with LogContext(logger, "Refresh cycle"):
        ...     controller.run_cycle()
        # Logs: "Refresh cycle completed in 234ms"
    """

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[datetime] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.log(self.level, f"{self.operation} starting...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (datetime.now() - self.start_time).total_seconds() * 1000

        if exc_type:
            self.logger.error(
                f"{self.operation} failed after {self.duration_ms:.0f}ms: {exc_val}"
            )
        else:
            self.logger.log(
                self.level,
                f"{self.operation} completed in {self.duration_ms:.0f}ms"
            )

        return False  # Don't suppress exceptions
