from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of the scanner preferences as JSON in the user
data directory. Missing or corrupted files fall back to defaults.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from snapshot4ai.domain.constants import CURRENT_CONFIG_VERSION, DEFAULT_MODEL_KEY
from snapshot4ai.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,

        # Input
        "input_path": os.getcwd(),

        # Scanning
        "max_concurrency": 1,

        # Rendering
        "show_sizes": False,

        # Analysis
        "target_model": DEFAULT_MODEL_KEY,

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
    }


def get_config_path() -> str:
    """Resolve the absolute path of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration from disk, merged over the defaults.

    Args:
        path: Optional explicit config file; defaults to the user data dir.

    Returns:
        Dict[str, Any]: The loaded configuration or defaults on failure.
    """
    config_path = path or get_config_path()
    defaults = get_default_config()

    if not os.path.exists(config_path):
        logger.debug("Config file not found. Returning defaults.")
        return defaults

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return defaults

    defaults.update(data)
    defaults["version"] = CURRENT_CONFIG_VERSION
    return defaults


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> None:
    """
    Persist the configuration to disk.

    Args:
        config: The configuration dictionary to save.
        path: Optional explicit config file; defaults to the user data dir.
    """
    config_path = path or get_config_path()
    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
        payload = dict(config)
        payload["version"] = CURRENT_CONFIG_VERSION
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
