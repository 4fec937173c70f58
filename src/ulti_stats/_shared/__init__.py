# Area: Shared
"""
Shared utilities.

This package contains:
- Logging configuration
"""

from .logging_config import setup_logging, log_storage_error, resolve_level

__all__ = [
    "setup_logging",
    "log_storage_error",
    "resolve_level",
]
