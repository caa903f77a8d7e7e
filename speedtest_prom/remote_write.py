"""Prometheus remote-write push client (protobuf + snappy over HTTP)."""
from typing import Callable, Dict, List, Optional, Sequence
import logging
import time

import requests
import snappy
from google.protobuf.message import EncodeError
from requests.auth import HTTPBasicAuth

from speedtest_prom import remote_pb2
from speedtest_prom.config import RemoteWriteConfig
from speedtest_prom.errors import EncodingError, ProtocolError, TransportError
from speedtest_prom.labels import Label
from speedtest_prom.series import MetricValue

logger = logging.getLogger(__name__)

REMOTE_WRITE_VERSION = "0.1.0"
SUCCESS_STATUS_CODES = (200, 204)
NAME_LABEL = "__name__"

MetricMap = Dict[str, List[MetricValue]]


def series_labels(base_labels: Sequence[Label], metric_name: str, value: MetricValue) -> List[Label]:
    """
    Labels for one series: base labels, then __name__, then the value's own labels.

    Value labels are sorted by name so the output is deterministic. Names are
    not deduplicated; a base label and a value label sharing a name both end
    up in the series.
    """
    labels = list(base_labels)
    labels.append((NAME_LABEL, metric_name))
    labels.extend(sorted(value.labels.items()))
    return labels


def add_timeseries(write_request, labels: Sequence[Label], value: float, timestamp_ms: int):
    """Append a TimeSeries holding a single sample to a WriteRequest."""
    series = write_request.timeseries.add()
    for name, label_value in labels:
        series.labels.add(name=name, value=label_value)
    series.samples.add(value=value, timestamp=timestamp_ms)
    return series


class RemoteWriteClient:
    """Pushes a metric mapping to a remote-write endpoint in a single request."""
    
    def __init__(self, config: RemoteWriteConfig, clock: Callable[[], float] = time.time):
        self.config = config
        self.clock = clock

    def headers(self) -> Dict[str, str]:
        """Protocol headers sent with every push (Authorization is added by requests)."""
        return {
            "Content-Encoding": "snappy",
            "Content-Type": "application/x-protobuf",
            "User-Agent": self.config.user_agent,
            "X-Prometheus-Remote-Write-Version": REMOTE_WRITE_VERSION,
        }

    def build_write_request(
        self,
        metrics: MetricMap,
        base_labels: Sequence[Label],
        timestamp_ms: Optional[int] = None,
    ):
        """
        Assemble a WriteRequest with one single-sample series per metric value.

        Every sample shares one timestamp, taken from the clock unless given.
        """
        if timestamp_ms is None:
            timestamp_ms = int(self.clock() * 1000)

        write_request = remote_pb2.WriteRequest()
        try:
            for metric_name, values in metrics.items():
                for value in values:
                    labels = series_labels(base_labels, metric_name, value)
                    add_timeseries(write_request, labels, float(value.value), timestamp_ms)
        except (TypeError, ValueError) as e:
            raise EncodingError(f"failed to build write request: {e}") from e

        return write_request

    def encode(self, write_request) -> bytes:
        """Serialize to protobuf and compress the whole buffer as one snappy block."""
        try:
            data = write_request.SerializeToString()
        except (EncodeError, ValueError) as e:
            raise EncodingError(f"failed to marshal protobuf: {e}") from e

        compressed = snappy.compress(data)
        logger.debug(f"Encoded {len(data)} bytes -> {len(compressed)} bytes (snappy compressed)")
        return compressed

    def _prepare(self, body: bytes) -> requests.PreparedRequest:
        username = self.config.username or ""
        password = self.config.password.get_secret_value() if self.config.password else ""
        request = requests.Request(
            "POST",
            self.config.url,
            data=body,
            headers=self.headers(),
            auth=HTTPBasicAuth(username.encode("utf-8"), password.encode("utf-8")),
        )
        try:
            return request.prepare()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise TransportError(f"failed to create request: {e}") from e

    def send(self, body: bytes) -> int:
        """
        POST an already encoded body.

        Returns the response status code when it is 200 or 204.

        Raises:
            TransportError: the request could not be built or sent.
            ProtocolError: the endpoint answered with any other status.
        """
        prepared = self._prepare(body)

        with requests.Session() as session:
            settings = session.merge_environment_settings(prepared.url, {}, None, None, None)
            try:
                response = session.send(prepared, timeout=self.config.timeout_s, **settings)
            except requests.exceptions.RequestException as e:
                raise TransportError(f"failed to send request: {e}") from e

            try:
                if response.status_code not in SUCCESS_STATUS_CODES:
                    raise ProtocolError(response.status_code, response.text[:512])
                return response.status_code
            finally:
                response.close()

    def push(self, metrics: MetricMap, base_labels: Sequence[Label]) -> int:
        """Build, encode and send the metric mapping. Returns the response status code."""
        write_request = self.build_write_request(metrics, base_labels)
        body = self.encode(write_request)

        logger.info(
            f"Pushing {len(write_request.timeseries)} series "
            f"({len(body)} bytes) to {self.config.url}"
        )
        status_code = self.send(body)
        logger.debug(f"Remote write endpoint answered {status_code}")
        return status_code
