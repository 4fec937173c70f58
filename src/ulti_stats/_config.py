# Area: Shared
"""
ulti_stats._config — Configuration
==================================

Loads configuration from an optional JSON file, a ``.env`` file and
environment variables (in increasing priority), and validates it.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ._shared.logging_config import resolve_level

logger = logging.getLogger("ulti_stats")

DEFAULT_CONFIG: Dict[str, Any] = {
    "db_path": "ulti_stats.db",
    "log_file": "ulti_stats.log",
    "log_level": "INFO",
    "scorekeeper": None,
}

# Environment variable -> config key
ENV_MAPPINGS = {
    "ULTI_STATS_DB": "db_path",
    "ULTI_STATS_LOG_FILE": "log_file",
    "ULTI_STATS_LOG_LEVEL": "log_level",
    "SCOREKEEPER": "scorekeeper",
}

REQUIRED_CONFIG_KEYS = [
    "db_path",
    "log_level",
]


def load_config(config_path: Optional[str] = None, dotenv_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the configuration dict.

    Args:
        config_path: Optional JSON config file
        dotenv_path: Optional .env file (default: search from cwd)

    Returns:
        Configuration dict with defaults filled in
    """
    config = dict(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config.update(json.load(f))
        else:
            logger.warning(f"Config file {config_path} not found, using defaults")

    load_dotenv(dotenv_path)

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            config[config_key] = os.environ[env_key]

    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate required configuration keys.

    Args:
        config: Configuration dict

    Raises:
        ValueError: If required keys are missing or the log level is unknown
    """
    missing = [k for k in REQUIRED_CONFIG_KEYS if not config.get(k)]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")
    resolve_level(config["log_level"])
