import enum


class OccupancyError(Exception):
    """Base class for everything the occupancy fetcher raises on purpose."""


class ConfigError(OccupancyError):
    """Configuration is missing or unparseable. Fatal to the whole run."""


class ZoneError(OccupancyError):
    """An endpoint names a timezone that isn't a known IANA zone."""


class TransportError(OccupancyError):
    """The request to an endpoint failed before a usable response came back."""


class UnexpectedResponse(TransportError):
    def __init__(self, status_code: int, url: str = ""):
        self.status_code = status_code
        self.url = url
        super().__init__(f"received unexpected response from server: {status_code} {url}".rstrip())


class ExtractionReason(str, enum.Enum):
    NO_MATCH = "no_match"
    MALFORMED_RECORD = "malformed_record"
    TIME_NOT_FOUND = "time_not_found"
    TIME_UNPARSEABLE = "time_unparseable"


class ExtractionError(OccupancyError):
    """The response body did not contain data in the shape we expect."""

    def __init__(self, reason: ExtractionReason, message: str = ""):
        self.reason = reason
        super().__init__(f"{reason.value}: {message}" if message else reason.value)


class TimeParseError(ExtractionError):
    pass
