"""Renders a write request in the Prometheus text exposition format (dry runs)."""
from typing import Dict, Iterator
import logging

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import Metric

from speedtest_prom.remote_write import NAME_LABEL

logger = logging.getLogger(__name__)


class WriteRequestCollector:
    """Custom collector exposing the series of a WriteRequest as untyped metrics."""
    
    def __init__(self, write_request):
        self.write_request = write_request

    def collect(self) -> Iterator[Metric]:
        families: Dict[str, Metric] = {}

        for series in self.write_request.timeseries:
            name = None
            labels: Dict[str, str] = {}
            for label in series.labels:
                if label.name == NAME_LABEL:
                    name = label.value
                else:
                    # Exposition labels are a mapping; a repeated name keeps its last value
                    labels[label.name] = label.value

            if name is None:
                logger.warning("Skipping series without a __name__ label")
                continue

            family = families.get(name)
            if family is None:
                family = Metric(name, f"Speedtest metric {name}", "unknown")
                families[name] = family

            for sample in series.samples:
                family.add_sample(name, labels, sample.value, timestamp=sample.timestamp / 1000.0)

        yield from families.values()


def render_text(write_request) -> str:
    """Return the series of a write request as exposition text."""
    registry = CollectorRegistry(auto_describe=False)
    registry.register(WriteRequestCollector(write_request))
    return generate_latest(registry).decode('utf-8')
