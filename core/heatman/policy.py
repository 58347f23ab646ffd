"""
Heater Policy

Decides whether the heater should be on. Pure function, no I/O.
"""

from .models import LockStatus, Reading
from .settings import HeaterConfig


def decide(
    config: HeaterConfig,
    reading: Reading | None,
    powered_on: bool,
    lock_status: LockStatus,
) -> bool:
    """Return whether the heater should be on.

    Force wins over everything else. Otherwise the heater runs only while the
    room is below target, CO2 is at least the minimum (when one is set), and
    the PC is on and not locked. An unknown lock status counts as unlocked.

    ``reading`` may only be None when force is set.
    """
    if config.force:
        return True

    if reading is None:
        raise ValueError("A reading is required unless force is set")

    return (
        reading.temperature < config.target_temp
        and (config.co2_target is None or reading.co2 >= config.co2_target)
        and powered_on
        and lock_status is not LockStatus.LOCKED
    )
