"""
Centralized logging configuration for tilecollapse.

Library modules only ask for loggers; nothing is written anywhere until an
application (the CLI, a test, an embedding program) calls setup_logging().
Log file: <log_dir>/debug.log (with rotation)

Usage:
    from tilecollapse.logging_config import setup_logging
    setup_logging(log_dir)  # Call once at startup

All tilecollapse.* loggers will write DEBUG to file, WARNING+ to console.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime


# Global configuration
ROOT_LOGGER_NAME = "tilecollapse"
LOG_FILE_NAME = "debug.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5  # Keep 5 backup files

_logging_initialized = False


def setup_logging(
    log_dir: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Configure the logging system for tilecollapse.

    Args:
        log_dir: Directory the log file goes in (created if missing)
        log_level: Level for file logging (default: DEBUG)
        console_level: Level for console output (default: WARNING)

    Returns:
        Path to the log file
    """
    global _logging_initialized

    log_path_dir = Path(log_dir)
    log_path_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_path_dir / LOG_FILE_NAME

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers (for re-initialization)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-40s | %(funcName)-22s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    # Console handler (less verbose)
    console_formatter = logging.Formatter(
        fmt="%(levelname)-8s | %(name)-30s | %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if not _logging_initialized:
        root_logger.info("=" * 80)
        root_logger.info(f"tilecollapse logging initialized at {datetime.now().isoformat()}")
        root_logger.info(f"Log file: {log_path.absolute()}")
        root_logger.info("=" * 80)
        _logging_initialized = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger configured as child of the tilecollapse logger
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_step(
    logger: logging.Logger,
    step: int,
    status: str,
    details: str | None = None,
) -> None:
    """Log one collapse+propagate step."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"STEP {step:06d} | {status}{details_str}")


def log_backtrack(
    logger: logging.Logger,
    step: int,
    position: tuple,
    remaining: int,
    details: str | None = None,
) -> None:
    """Log a backtrack to the step checkpoint."""
    details_str = f" | {details}" if details else ""
    logger.debug(
        f"STEP {step:06d} | BACKTRACK | square={tuple(position)} | remaining={remaining}{details_str}"
    )


def log_attempt(
    logger: logging.Logger,
    attempt: int,
    seed: int,
    status: str,
    duration_ms: int | None = None,
    details: str | None = None,
) -> None:
    """Log one whole-grid attempt of the outer retry loop."""
    duration_str = f" | {duration_ms}ms" if duration_ms else ""
    details_str = f" | {details}" if details else ""
    logger.info(f"ATTEMPT {attempt:04d} | seed={seed} | {status}{duration_str}{details_str}")


def log_storage(
    logger: logging.Logger,
    operation: str,
    path: Path | str | None = None,
    success: bool = True,
    details: str | None = None,
) -> None:
    """Log file operations (catalog loading)."""
    status = "OK" if success else "FAILED"
    path_str = f" | {path}" if path else ""
    details_str = f" | {details}" if details else ""
    logger.debug(f"STORAGE | {operation}{path_str} | {status}{details_str}")
