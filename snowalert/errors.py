"""Exception types raised by the snow alert service."""


class SnowAlertError(Exception):
    """Base class for service errors."""


class ForecastParseError(SnowAlertError):
    """Upstream forecast payload is missing required structure."""


class NotificationError(SnowAlertError):
    """A notification could not be delivered."""


class LocationNotFoundError(SnowAlertError):
    """No tracked location matches the given name or id."""
