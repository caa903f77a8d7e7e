"""Maps a speedtest result onto the fixed set of speedtest_* metrics."""
from typing import Dict, List, Sequence

from speedtest_prom.labels import Label
from speedtest_prom.result import LatencyStats, SpeedtestResult, TransferStats
from speedtest_prom.series import MetricValue

METRIC_NAMES = (
    "speedtest_ping_latency",
    "speedtest_download_bandwidth",
    "speedtest_download_latency",
    "speedtest_upload_bandwidth",
    "speedtest_upload_latency",
    "speedtest_packet_loss",
)


def _fmt2(value: float) -> str:
    return f"{value:.2f}"


def _bandwidth(stats: TransferStats) -> MetricValue:
    return MetricValue(
        value=float(stats.bandwidth),
        labels={
            "bytes": str(stats.bytes),
            "elapsed": str(stats.elapsed),
        },
    )


def _latency(stats: LatencyStats) -> MetricValue:
    # The interquartile mean is both the sample value and a label.
    return MetricValue(
        value=stats.iqm,
        labels={
            "jitter": _fmt2(stats.jitter),
            "low": _fmt2(stats.low),
            "high": _fmt2(stats.high),
            "iqm": _fmt2(stats.iqm),
        },
    )


def build_metrics(result: SpeedtestResult) -> Dict[str, List[MetricValue]]:
    """
    Build the metric mapping for one speedtest result.

    Always returns all six speedtest_* metrics, one value each, whatever the
    field values are.
    """
    return {
        "speedtest_ping_latency": [
            MetricValue(
                value=result.ping.latency,
                labels={
                    "jitter": _fmt2(result.ping.jitter),
                    "low": _fmt2(result.ping.low),
                    "high": _fmt2(result.ping.high),
                },
            )
        ],
        "speedtest_download_bandwidth": [_bandwidth(result.download)],
        "speedtest_download_latency": [_latency(result.download.latency)],
        "speedtest_upload_bandwidth": [_bandwidth(result.upload)],
        "speedtest_upload_latency": [_latency(result.upload.latency)],
        "speedtest_packet_loss": [MetricValue(value=result.packet_loss)],
    }


def build_base_labels(result: SpeedtestResult, extra: Sequence[Label] = ()) -> List[Label]:
    """Combine the per-result identity labels with caller-supplied extra labels."""
    labels: List[Label] = [
        ("isp", result.isp),
        ("server_id", str(result.server.id)),
        ("server_name", result.server.name),
        ("result_id", result.result.id),
        ("result_url", result.result.url),
    ]
    labels.extend(extra)
    return labels
