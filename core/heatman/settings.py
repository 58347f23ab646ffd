"""
Heatman Configuration Settings

Two kinds of configuration live here:
- HeaterConfig: user-facing heater settings, edited through the API and
  persisted to a JSON file by config_store.
- ControllerSettings: deployment settings (endpoints, timing, server), loaded
  from options.json (add-on), config.yaml (development) and environment
  variables.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, fields
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

OPTIONS_PATH = "/data/options.json"
CONFIG_YAML_PATH = os.path.join(os.path.dirname(__file__), "..", "..", "config.yaml")
ENV_PREFIX = "HEATMAN_"


def _camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def _to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class HeaterConfig(BaseModel):
    """User configuration for the heater."""

    model_config = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)

    master_switch: bool = True  # When off the heater service does nothing at all
    force: bool = False  # Keep the heater on regardless of readings
    target_temp: float = 28.0  # Heat while the room is below this (°C)
    co2_target: Optional[int] = Field(default=500, ge=0)  # Minimum CO2 (ppm) that counts as occupied


@dataclass
class ControllerSettings:
    """Deployment settings for the controller."""

    metrics_url: str = "http://localhost:8000"
    pc_address: str = "192.168.178.89"
    lock_url: str = ""  # Defaults to the WinLock server on pc_address
    plug_url: str = "http://192.168.178.86/rpc/"
    plug_switch_id: int = 0
    config_path: str = "heater_config.json"
    check_interval_seconds: float = 15.0
    ping_timeout: float = 1.0
    http_timeout: float = 5.0
    probe_when_forced: bool = True
    host: str = "0.0.0.0"
    port: int = 5567

    def __post_init__(self):
        if not self.lock_url:
            self.lock_url = f"http://{self.pc_address}:26969/"
        if self.check_interval_seconds <= 0:
            raise ConfigurationError("check_interval_seconds must be positive")
        if self.ping_timeout <= 0:
            raise ConfigurationError("ping_timeout must be positive")

    @classmethod
    def from_dict(cls, data: dict) -> "ControllerSettings":
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name: f for f in fields(cls)}
        converted = {}
        for key, value in data.items():
            name = _camel_to_snake(key)
            if name not in known:
                logger.debug(f"Ignoring unknown setting: {key}")
                continue
            converted[name] = _coerce(known[name].type, value, name)
        return cls(**converted)


def _coerce(field_type, value, name: str):
    """Cast a raw option value to the declared field type."""
    try:
        if field_type in (bool, "bool"):
            return _to_bool(value)
        if field_type in (int, "int"):
            return int(value)
        if field_type in (float, "float"):
            return float(value)
        return str(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}") from e


def _env_overrides() -> dict:
    """Collect HEATMAN_* environment variables (after loading .env)."""
    load_dotenv()
    overrides = {}
    for f in fields(ControllerSettings):
        value = os.getenv(ENV_PREFIX + f.name.upper())
        if value is not None:
            overrides[f.name] = value
    return overrides


def load_settings(
    options_path: str = OPTIONS_PATH,
    config_path: str = CONFIG_YAML_PATH,
) -> ControllerSettings:
    """Load controller settings.

    Order of precedence (later wins):
    1. options.json (Home Assistant add-on, production)
    2. config.yaml ``options`` section (development), only if no options.json
    3. HEATMAN_* environment variables / .env
    """
    options: dict = {}

    if os.path.exists(options_path):
        with open(options_path) as f:
            options = json.load(f)
        logger.info(f"Loaded settings from {options_path}")
    elif os.path.exists(config_path):
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
        options = config.get("options", {}) or {}
        logger.info(f"Loaded settings from {config_path}")

    options.update(_env_overrides())
    return ControllerSettings.from_dict(options)
