"""
Configuration loader for loading and validating config.json.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .models import AppConfig


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.json"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from JSON file.

    A missing file is not an error: the tool is normally run without one,
    so defaults are returned.

    Args:
        path: Path to config.json file. If None, looks for config.json in current directory.

    Returns:
        Validated AppConfig instance.

    Raises:
        ConfigurationError: If config file exists but is unreadable or invalid.
    """
    if path is None:
        path = DEFAULT_CONFIG_FILE

    config_path = Path(path)

    if not config_path.exists():
        logger.debug(f"Config file not found: {config_path}. Using defaults.")
        return AppConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in {config_path}: {e}"
        ) from e
    except IOError as e:
        raise ConfigurationError(
            f"Failed to read {config_path}: {e}"
        ) from e

    # Comment keys are allowed so example files can document themselves
    config_dict = {k: v for k, v in config_dict.items() if not k.startswith("_")}

    try:
        config = AppConfig(**config_dict)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field = " -> ".join(str(x) for x in error["loc"])
            msg = error["msg"]
            errors.append(f"  - {field}: {msg}")

        error_message = "Configuration validation failed:\n" + "\n".join(errors)
        raise ConfigurationError(error_message) from e

    logger.debug(f"Configuration loaded from {config_path}")
    return config


def create_example_config(path: str = "config.example.json") -> None:
    """
    Create an example configuration file with all default values.

    Args:
        path: Path where to create the example config file.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    config = AppConfig()

    save_data = {
        "_comment": "aquosctl configuration. Every key is optional; command line options win.",
        **config.model_dump()
    }

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(save_data, f, indent=2)
    except IOError as e:
        raise ConfigurationError(f"Failed to write {path}: {e}") from e

    logger.info(f"Example configuration created: {path}")
