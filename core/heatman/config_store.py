"""
Heater Config Persistence

Reads and writes the heater configuration as a single JSON document.
"""

import json
import logging
import os
import tempfile

from pydantic import ValidationError

from .settings import HeaterConfig

logger = logging.getLogger(__name__)


def load_config(path: str) -> HeaterConfig:
    """Load heater config from disk.

    Missing fields take their defaults. A missing or unreadable file yields
    the default config.
    """
    if not os.path.exists(path):
        logger.info(f"No heater config at {path}, using defaults")
        return HeaterConfig()

    try:
        with open(path) as f:
            data = json.load(f)
        config = HeaterConfig.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Could not read heater config from {path}, using defaults: {e}")
        return HeaterConfig()

    logger.info(f"Loaded heater config from {path}: {config}")
    return config


def save_config(path: str, config: HeaterConfig) -> None:
    """Write heater config to disk, replacing the previous file atomically."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".heater_config.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(config.model_dump_json())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.debug(f"Saved heater config to {path}")
