"""
Heater Service

Background service that keeps the heater plug in line with the heater policy.
Every tick it reads the config, gathers readings and presence, decides whether
the heater should run and switches the plug only when its state differs.
"""

import asyncio
import logging

from .config_store import save_config
from .exceptions import HeatmanError, UnreachableError
from .metrics_client import MetricsClient
from .models import ControllerState, LockStatus, Reading, TickOutcome
from .plug_client import PlugClient
from .policy import decide
from .presence import PresenceProbe
from .settings import HeaterConfig

logger = logging.getLogger(__name__)


class HeaterService:
    """
    Reconciliation loop for the heater.

    Ticks never overlap: periodic ticks and out-of-band checks (after a config
    change) share one lock. The state lock is only held to copy or swap the config or
    update availability, never across network calls. Config writes are
    serialized on their own lock so the file and memory stay in step.
    """

    def __init__(
        self,
        state: ControllerState,
        metrics: MetricsClient,
        presence: PresenceProbe,
        plug: PlugClient,
        check_interval_seconds: float = 15,
        probe_when_forced: bool = True,
        config_path: str | None = None,
    ):
        self.state = state
        self.metrics = metrics
        self.presence = presence
        self.plug = plug
        self.check_interval_seconds = check_interval_seconds
        self.probe_when_forced = probe_when_forced
        self.config_path = config_path

        self._state_lock = asyncio.Lock()
        self._config_write_lock = asyncio.Lock()
        self._tick_lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self._running = False

    async def get_config(self) -> HeaterConfig:
        async with self._state_lock:
            return self.state.config

    async def is_available(self) -> bool:
        async with self._state_lock:
            return self.state.available

    async def replace_config(self, config: HeaterConfig) -> None:
        """Persist and swap in a new config. Call check_now() afterwards to apply it."""
        async with self._config_write_lock:
            if self.config_path:
                await asyncio.to_thread(save_config, self.config_path, config)
            async with self._state_lock:
                self.state.config = config
        logger.info(f"Updated config to {config}")

    async def start(self):
        """Start the heater service."""
        if self._running:
            logger.warning("Heater service already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"Heater service started (interval: {self.check_interval_seconds} seconds)")

    async def stop(self):
        """Stop the heater service."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        logger.info("Heater service stopped")

    async def _run_loop(self):
        """Main loop - one tick per interval, measured from tick start."""
        loop = asyncio.get_running_loop()

        while self._running:
            started = loop.time()
            try:
                await self.run_tick()
            except Exception as e:
                logger.error(f"Error in heater loop: {e}", exc_info=True)

            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self.check_interval_seconds - elapsed))

    async def check_now(self) -> TickOutcome:
        """Run one tick immediately, outside the periodic schedule."""
        return await self.run_tick()

    async def run_tick(self) -> TickOutcome:
        """Run one reconciliation tick and record availability.

        Failures are logged and returned in the outcome, never raised.
        """
        async with self._tick_lock:
            config = await self.get_config()

            try:
                outcome = await self.check_heater(config)
            except UnreachableError as e:
                logger.warning(f"Heater check failed, service unreachable: {e}")
                outcome = TickOutcome(error=e)
            except HeatmanError as e:
                logger.error(f"Heater check failed: {e}")
                outcome = TickOutcome(error=e)
            except Exception as e:
                logger.error(f"Unexpected error during heater check: {e}", exc_info=True)
                outcome = TickOutcome(error=e)

            if not outcome.skipped:
                await self._set_available(outcome.ok)
            return outcome

    async def check_heater(self, config: HeaterConfig) -> TickOutcome:
        """Compare the desired heater state to the plug and switch if necessary.

        Raises:
            HeatmanError: If any service needed for the decision or the switch fails
        """
        if not config.master_switch:
            logger.debug("Master switch is off, skipping check")
            return TickOutcome(skipped=True)

        should_be_on = await self.should_be_on(config)
        is_on = await self.plug.async_query_power()

        outcome = TickOutcome(should_be_on=should_be_on, was_on=is_on)
        if should_be_on != is_on:
            await self.plug.async_set_power(should_be_on)
            outcome.switched = True
            logger.info(f"Switched heater {'on' if should_be_on else 'off'}")
        return outcome

    async def should_be_on(self, config: HeaterConfig) -> bool:
        """Gather readings and presence, then apply the heater policy."""
        if config.force and not self.probe_when_forced:
            return decide(config, None, False, LockStatus.UNKNOWN)

        reading = await self.metrics.async_fetch_readings()
        powered_on = await self.presence.is_powered_on()
        lock_status = await self.presence.lock_status()

        logger.debug(
            f"temperature={reading.temperature} co2={reading.co2} "
            f"pc_on={powered_on} lock={lock_status.value}"
        )
        return decide(config, reading, powered_on, lock_status)

    async def read_status(self) -> tuple[Reading, bool]:
        """Read current temperature, CO2 and plug output for display."""
        reading, is_on = await asyncio.gather(
            self.metrics.async_fetch_readings(),
            self.plug.async_query_power(),
        )
        return reading, is_on

    async def _set_available(self, available: bool) -> None:
        async with self._state_lock:
            if self.state.available == available:
                return
            self.state.available = available
        logger.info(f"Heater availability changed to {available}")
