"""Models for the JSON document produced by `speedtest --format=json`."""
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from speedtest_prom.errors import InputError, summarize_validation_error


class _ResultModel(BaseModel):
    """
    Base for all result models.

    Types are strict: a string where a number belongs (or the reverse) is
    rejected. A JSON null keeps the field's zero value, as does a missing field.
    """
    model_config = ConfigDict(strict=True, populate_by_name=True)

    @field_validator('*', mode='before')
    @classmethod
    def null_to_default(cls, v, info):
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v


class PingStats(_ResultModel):
    """Idle latency measured before the transfer phases."""
    jitter: float = 0.0
    latency: float = 0.0
    low: float = 0.0
    high: float = 0.0


class LatencyStats(_ResultModel):
    """Loaded latency measured during a transfer phase."""
    iqm: float = 0.0
    low: float = 0.0
    high: float = 0.0
    jitter: float = 0.0


class TransferStats(_ResultModel):
    """Download or upload phase results."""
    bandwidth: int = 0  # bytes per second
    bytes: int = 0
    elapsed: int = 0  # milliseconds
    latency: LatencyStats = Field(default_factory=LatencyStats)


class ServerInfo(_ResultModel):
    """Speedtest server the measurement ran against."""
    id: int = 0
    name: str = ""
    location: str = ""


class ResultInfo(_ResultModel):
    """Identifier and share URL of the published result."""
    id: str = ""
    url: str = ""


class SpeedtestResult(_ResultModel):
    """A single speedtest run. Fields missing from the input default to zero values."""
    ping: PingStats = Field(default_factory=PingStats)
    download: TransferStats = Field(default_factory=TransferStats)
    upload: TransferStats = Field(default_factory=TransferStats)
    packet_loss: float = Field(default=0.0, alias="packetLoss")
    isp: str = ""
    server: ServerInfo = Field(default_factory=ServerInfo)
    result: ResultInfo = Field(default_factory=ResultInfo)

    @model_validator(mode='before')
    @classmethod
    def null_document(cls, data):
        # A top-level null decodes to an all-zero result
        return {} if data is None else data


def parse_result(raw: bytes) -> SpeedtestResult:
    """Decode a speedtest result from raw JSON bytes."""
    try:
        return SpeedtestResult.model_validate_json(raw)
    except ValidationError as e:
        raise InputError(f"Error parsing JSON: {summarize_validation_error(e)}") from e
