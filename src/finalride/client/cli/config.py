"""Configuration utilities for the FinalRide CLI.

This module provides shared configuration functions used across CLI commands.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from finalride.core.config import TransferConfig
from finalride.core.errors import ConfigError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_config_dir() -> Path:
    """Get the configuration directory for FinalRide.

    Returns:
        Path to ~/.finalride or equivalent.
    """
    return Path.home() / ".finalride"


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_config() -> TransferConfig:
    """Load configuration from config file, falling back to defaults.

    Raises:
        ConfigError: If the file exists but is not a valid configuration.
    """
    config_file = get_config_file()
    if not config_file.exists():
        return TransferConfig()
    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse config file {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a JSON object")
    return TransferConfig.from_dict(data)


def save_config(config: TransferConfig) -> None:
    """Save configuration to config file."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")


def setup_logging(verbose: bool) -> None:
    """Send finalride logs to stderr.

    Args:
        verbose: Show debug messages; otherwise only warnings and errors.
    """
    finalride_logger = logging.getLogger("finalride")
    for handler in finalride_logger.handlers[:]:
        finalride_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    finalride_logger.addHandler(handler)
    finalride_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    finalride_logger.propagate = False
