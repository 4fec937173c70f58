# Area: Shared
"""
ulti_stats._shared.logging_config — Structured logging setup
============================================================

Configures dual logging: terminal (colored) + file (JSON lines).
Provides structured logging for storage errors.
"""

from __future__ import annotations
import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from ..errors import StorageUnavailableError

# Package logger
logger = logging.getLogger("ulti_stats")


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        original = record.levelname
        record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    """JSON formatter for file output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("operation", "error_type", "game_id", "event_id"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def resolve_level(level: Union[int, str]) -> int:
    """
    Turn a level name ("INFO") or number into a logging level.

    Raises:
        ValueError: If the name is not a known level
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    log_file_path: str = "ulti_stats.log",
    level: Union[int, str] = logging.INFO,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str
        Path to the log file. Defaults to 'ulti_stats.log' in current dir.
    level : int or str
        Logging level. Defaults to INFO.
    """
    level = resolve_level(level)

    pkg_logger = logging.getLogger("ulti_stats")
    pkg_logger.setLevel(level)

    # Remove existing handlers
    pkg_logger.handlers.clear()

    # Terminal handler with colors
    terminal_handler = logging.StreamHandler(sys.stderr)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    pkg_logger.addHandler(terminal_handler)

    # File handler with JSON
    try:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        pkg_logger.addHandler(file_handler)
    except OSError as e:
        pkg_logger.warning(f"Could not create log file: {e}")

    # Prevent propagation to root logger
    pkg_logger.propagate = False


def log_storage_error(error: "StorageUnavailableError") -> None:
    """
    Log a storage error in the structured format.

    Parameters
    ----------
    error : StorageUnavailableError
        The error to log.
    """
    # Print to terminal (bypassing logger for exact formatting)
    print(error.format_error_log(), file=sys.stderr)

    # Also log to file via logger
    logger.error(
        f"Storage error: {error}",
        extra={
            "operation": error.operation,
            "error_type": error.__class__.__name__,
        },
    )
