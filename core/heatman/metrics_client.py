"""
Metrics Exporter Client

Reads temperature and CO2 from the Prometheus-style exporter running on the
local machine (https://github.com/PlanetTeamSpeakk/Metrics).
"""

import asyncio
import logging
import math

import requests

from .exceptions import MetricParseError, MetricUnreachableError, MissingMetricError
from .models import Reading

logger = logging.getLogger(__name__)

TEMPERATURE_METRIC = "temperature"
CO2_METRIC = "co2"


def parse_exposition(body: str) -> dict[str, str]:
    """Parse ``name value`` lines into a dict.

    Comment lines (``#``) are skipped, as is any line that does not split into
    exactly two whitespace-separated tokens.
    """
    metrics = {}
    for line in body.splitlines():
        if line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) != 2:
            continue
        metrics[parts[0]] = parts[1]
    return metrics


class MetricsClient:
    """Client for the local metrics exporter."""

    def __init__(self, url: str, timeout: float = 5, session: requests.Session | None = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_metrics(self) -> dict[str, str]:
        """Fetch and parse every metric the exporter currently reports.

        Raises:
            MetricUnreachableError: If the exporter cannot be reached
        """
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise MetricUnreachableError(f"Metrics request failed: {e}") from e
        return parse_exposition(response.text)

    def fetch_readings(self) -> Reading:
        """Fetch the current temperature and CO2 level.

        CO2 is reported as a float by the exporter and truncated to ppm.

        Raises:
            MetricUnreachableError: If the exporter cannot be reached
            MissingMetricError: If temperature or co2 is not reported
            MetricParseError: If a value is not numeric or temperature is not finite
        """
        metrics = self.fetch_metrics()

        for name in (TEMPERATURE_METRIC, CO2_METRIC):
            if name not in metrics:
                raise MissingMetricError(name)

        try:
            temperature = float(metrics[TEMPERATURE_METRIC])
            co2 = int(float(metrics[CO2_METRIC]))
        except (ValueError, OverflowError) as e:
            raise MetricParseError(f"Invalid metric value: {e}") from e

        if not math.isfinite(temperature):
            raise MetricParseError(f"Temperature is not finite: {temperature}")

        logger.debug(f"Read temperature={temperature} co2={co2}")
        return Reading(temperature=temperature, co2=co2)

    async def async_fetch_readings(self) -> Reading:
        """Run fetch_readings in a worker thread."""
        return await asyncio.to_thread(self.fetch_readings)
