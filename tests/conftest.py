"""
Shared test fixtures for the Heatman test suite.

Provides fake clients that record every call, so tests can assert exactly
which network operations a tick performed.
"""

import logging

import pytest

from core.heatman.exceptions import ActuatorUnreachableError, MetricUnreachableError
from core.heatman.heater_service import HeaterService
from core.heatman.models import ControllerState, LockStatus, Reading
from core.heatman.settings import HeaterConfig

logging.getLogger("core").setLevel(logging.WARNING)


class FakeMetrics:
    def __init__(self, reading: Reading = Reading(17.0, 520)):
        self.reading = reading
        self.error: Exception | None = None
        self.calls = 0

    async def async_fetch_readings(self) -> Reading:
        self.calls += 1
        if self.error:
            raise self.error
        return self.reading


class FakePresence:
    def __init__(self, powered_on: bool = True, lock: LockStatus = LockStatus.UNLOCKED):
        self.powered_on = powered_on
        self.lock = lock
        self.error: Exception | None = None
        self.ping_calls = 0
        self.lock_calls = 0

    async def is_powered_on(self) -> bool:
        self.ping_calls += 1
        if self.error:
            raise self.error
        return self.powered_on

    async def lock_status(self) -> LockStatus:
        self.lock_calls += 1
        return self.lock


class FakePlug:
    def __init__(self, on: bool = False):
        self.on = on
        self.error: Exception | None = None
        self.query_calls = 0
        self.set_calls: list[bool] = []

    async def async_query_power(self) -> bool:
        self.query_calls += 1
        if self.error:
            raise self.error
        return self.on

    async def async_set_power(self, on: bool) -> None:
        if self.error:
            raise self.error
        self.set_calls.append(on)
        self.on = on

    @property
    def total_calls(self) -> int:
        return self.query_calls + len(self.set_calls)


def network_calls(metrics: FakeMetrics, presence: FakePresence, plug: FakePlug) -> int:
    return metrics.calls + presence.ping_calls + presence.lock_calls + plug.total_calls


@pytest.fixture()
def metrics():
    return FakeMetrics()


@pytest.fixture()
def presence():
    return FakePresence()


@pytest.fixture()
def plug():
    return FakePlug()


@pytest.fixture()
def make_service(metrics, presence, plug):
    """Factory for a HeaterService wired to the fake clients."""

    def _make(config: HeaterConfig | None = None, **kwargs) -> HeaterService:
        state = ControllerState(config=config or HeaterConfig(target_temp=18.0, co2_target=500))
        return HeaterService(state, metrics, presence, plug, **kwargs)

    return _make


@pytest.fixture()
def unreachable_plug(plug):
    plug.error = ActuatorUnreachableError("plug down")
    return plug


@pytest.fixture()
def unreachable_metrics(metrics):
    metrics.error = MetricUnreachableError("exporter down")
    return metrics
