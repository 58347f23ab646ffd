"""
Shelly Plug RPC Client

Minimal client for reading and switching the smart plug that powers the heater.
"""

import asyncio
import logging
from typing import Any

import requests

from .exceptions import ActuatorUnreachableError, MalformedResponseError

logger = logging.getLogger(__name__)


class PlugClient:
    """Shelly Plus Plug S RPC client."""

    def __init__(
        self,
        base_url: str,
        switch_id: int = 0,
        timeout: float = 5,
        session: requests.Session | None = None,
    ):
        """Initialize plug client.

        Args:
            base_url: RPC endpoint of the plug (e.g., "http://192.168.178.86/rpc/")
            switch_id: Index of the switch component on the plug
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.switch_id = switch_id
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def status_url(self) -> str:
        return f"{self.base_url}/Shelly.GetStatus"

    @property
    def switch_set_url(self) -> str:
        return f"{self.base_url}/Switch.Set"

    def get_status(self) -> dict[str, Any]:
        """Get the full device status.

        Raises:
            ActuatorUnreachableError: If the request fails
            MalformedResponseError: If the body is not a JSON object
        """
        try:
            response = self.session.get(self.status_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ActuatorUnreachableError(f"Plug status request failed: {e}") from e

        try:
            status = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Plug status is not JSON: {e}") from e
        if not isinstance(status, dict):
            raise MalformedResponseError("Plug status is not a JSON object")
        return status

    def query_power(self) -> bool:
        """Return whether the plug output (and thus the heater) is on.

        Raises:
            ActuatorUnreachableError: If the request fails
            MalformedResponseError: If the switch output field is missing or not a bool
        """
        status = self.get_status()
        key = f"switch:{self.switch_id}"

        switch = status.get(key)
        if not isinstance(switch, dict):
            raise MalformedResponseError(f"Plug status has no {key} object")

        output = switch.get("output")
        if not isinstance(output, bool):
            raise MalformedResponseError(f"{key}.output is missing or not a bool: {output!r}")
        return output

    def set_power(self, on: bool) -> None:
        """Switch the plug output on or off.

        The result is not read back; the next status query confirms it.

        Raises:
            ActuatorUnreachableError: If the request fails
        """
        params = {"id": self.switch_id, "on": "true" if on else "false"}
        try:
            response = self.session.get(self.switch_set_url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ActuatorUnreachableError(f"Plug switch request failed: {e}") from e
        logger.debug(f"Plug switch {self.switch_id} set to {params['on']}")

    async def async_query_power(self) -> bool:
        return await asyncio.to_thread(self.query_power)

    async def async_set_power(self, on: bool) -> None:
        await asyncio.to_thread(self.set_power, on)
