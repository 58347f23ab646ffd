"""
Heatman Data Models
"""

from dataclasses import dataclass, field
from enum import Enum

from .settings import HeaterConfig


class LockStatus(str, Enum):
    """Lock state of the companion PC."""

    LOCKED = "locked"
    UNLOCKED = "unlocked"
    UNKNOWN = "unknown"  # Lock server did not answer, treated as unlocked


@dataclass(frozen=True)
class Reading:
    """Current readings from the metrics exporter."""

    temperature: float  # °C
    co2: int  # ppm


@dataclass
class ControllerState:
    """State shared between the heater service and the API."""

    config: HeaterConfig = field(default_factory=HeaterConfig)
    available: bool = True  # Whether the last tick reached every service


@dataclass
class TickOutcome:
    """Result of a single reconciliation tick."""

    skipped: bool = False
    should_be_on: bool | None = None
    was_on: bool | None = None
    switched: bool = False
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
