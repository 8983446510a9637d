"""
Configuration management for reminders-cli.
"""

import os
from pathlib import Path
from typing import Optional

from .models import CliConfig

CONFIG_ENV_VAR = "REMINDERS_CLI_CONFIG"
WORKING_DIR_NAME = ".reminders-cli"
CONFIG_FILE = "config.json"


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(os.path.expanduser(override))
    return Path.home() / WORKING_DIR_NAME / CONFIG_FILE


def load_config(config_path: Optional[str] = None) -> CliConfig:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        CliConfig object
    """
    if config_path is None:
        config_path = str(get_default_config_path())

    return CliConfig.load_from_file(config_path)


def save_config(config: CliConfig, config_path: Optional[str] = None):
    """
    Save configuration to file.

    Args:
        config: CliConfig object to save
        config_path: Optional path to save to. Uses default if not provided.
    """
    if config_path is None:
        config_path = str(get_default_config_path())

    config_dir = os.path.dirname(os.path.abspath(os.path.expanduser(config_path)))
    os.makedirs(config_dir, exist_ok=True)

    config.save_to_file(config_path)
