"""Heatman heater control package."""

# Define public API
__all__ = [
    "ControllerSettings",
    "ControllerState",
    "HeaterConfig",
    "HeaterService",
    "LockStatus",
    "MetricsClient",
    "PlugClient",
    "PresenceProbe",
    "Reading",
    "decide",
]

# Import settings
from .settings import ControllerSettings, HeaterConfig

# Import models
from .models import ControllerState, LockStatus, Reading

# Import clients
from .metrics_client import MetricsClient
from .plug_client import PlugClient
from .presence import PresenceProbe

# Import control
from .heater_service import HeaterService
from .policy import decide
