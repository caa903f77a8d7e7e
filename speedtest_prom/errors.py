"""Error taxonomy for the speedtest remote-write pusher."""
from typing import Optional


class SpeedtestPromError(Exception):
    """Base class for every failure that should terminate the process."""


class InputError(SpeedtestPromError):
    """Standard input could not be read or did not decode as a speedtest result."""


class ConfigError(SpeedtestPromError):
    """Required configuration is missing or invalid."""


class FormatError(ConfigError):
    """A label string does not follow the key=value,key=value grammar."""


class EncodingError(SpeedtestPromError):
    """The write request could not be serialized."""


class TransportError(SpeedtestPromError):
    """The HTTP request could not be built or sent."""


class ProtocolError(SpeedtestPromError):
    """The remote-write endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"unexpected status code: {status_code}")


def summarize_validation_error(error) -> str:
    """Collapse a pydantic ValidationError into a single line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "input"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)
