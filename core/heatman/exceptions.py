"""
Heatman Custom Exceptions

Simple exception hierarchy for error handling.
"""


class HeatmanError(Exception):
    """Base exception for Heatman."""

    pass


class ConfigurationError(HeatmanError):
    """Configuration is invalid."""

    pass


class UnreachableError(HeatmanError):
    """A remote service could not be reached."""

    pass


class GatewayError(HeatmanError):
    """Metrics could not be read from the exporter."""

    pass


class MetricUnreachableError(GatewayError, UnreachableError):
    """Metrics exporter is unreachable."""

    pass


class MissingMetricError(GatewayError):
    """A required metric is absent from the exposition."""

    def __init__(self, name: str):
        super().__init__(f"Metric not found: {name}")
        self.name = name


class MetricParseError(GatewayError):
    """A metric value is not numeric."""

    pass


class ProbeError(HeatmanError):
    """The PC liveness probe failed for a reason other than no reply."""

    pass


class ActuatorError(HeatmanError):
    """The smart plug could not be queried or switched."""

    pass


class ActuatorUnreachableError(ActuatorError, UnreachableError):
    """Smart plug is unreachable."""

    pass


class MalformedResponseError(ActuatorError):
    """Smart plug answered without the expected fields."""

    pass
