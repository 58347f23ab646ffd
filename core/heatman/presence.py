"""
Companion PC Presence Probe

Tells whether the PC is switched on (ICMP echo) and whether its session is
locked (WinLock server, https://github.com/PlanetTeamSpeakk/WinLockServer).
"""

import asyncio
import logging

import requests
from icmplib import ICMPLibError, async_ping

from .exceptions import ProbeError
from .models import LockStatus

logger = logging.getLogger(__name__)

LOCKED_SENTINEL = "1"  # WinLock answers 1 = locked, 0 = unlocked


class PresenceProbe:
    """Liveness and lock probes for the companion PC."""

    def __init__(
        self,
        address: str,
        lock_url: str,
        ping_timeout: float = 1.0,
        http_timeout: float = 5,
        session: requests.Session | None = None,
    ):
        self.address = address
        self.lock_url = lock_url
        self.ping_timeout = ping_timeout
        self.http_timeout = http_timeout
        self.session = session or requests.Session()

    async def is_powered_on(self) -> bool:
        """Send a single echo request to the PC.

        No reply within the timeout means the PC is off, which is a normal
        answer and not an error.

        Raises:
            ProbeError: If the probe itself could not be sent
        """
        try:
            host = await async_ping(
                self.address,
                count=1,
                timeout=self.ping_timeout,
                privileged=False,
            )
        except (ICMPLibError, OSError) as e:
            raise ProbeError(f"Ping to {self.address} failed: {e}") from e

        logger.debug(f"PC {self.address} alive: {host.is_alive}")
        return host.is_alive

    def get_lock_status(self) -> LockStatus:
        """Ask the lock server whether the PC is locked. Never raises."""
        try:
            response = self.session.get(self.lock_url, timeout=self.http_timeout)
            body = response.text
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.debug(f"Lock status unavailable: {e}")
            return LockStatus.UNKNOWN

        if body.strip() == LOCKED_SENTINEL:
            return LockStatus.LOCKED
        return LockStatus.UNLOCKED

    async def lock_status(self) -> LockStatus:
        """Run get_lock_status in a worker thread."""
        return await asyncio.to_thread(self.get_lock_status)
