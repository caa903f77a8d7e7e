#!/usr/bin/env python3
"""Tests for the speedtest result model and metric builder."""
import dataclasses
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from speedtest_prom.builder import METRIC_NAMES, build_base_labels, build_metrics
from speedtest_prom.errors import InputError
from speedtest_prom.result import SpeedtestResult, parse_result
from speedtest_prom.series import MetricValue

FIXTURE = Path(__file__).parent / "fixtures" / "result.json"


def load_fixture() -> SpeedtestResult:
    return parse_result(FIXTURE.read_bytes())


def test_fixture_decodes():
    result = load_fixture()
    assert result.ping.latency == 12.3
    assert result.download.bandwidth == 5000000
    assert result.download.latency.iqm == 20.456
    assert result.packet_loss == 0.01
    assert result.server.id == 42
    assert result.server.location == "Berlin"
    assert result.result.url == "http://x"


def test_missing_fields_default_to_zero_values():
    result = parse_result(b"{}")
    assert result.ping.latency == 0.0
    assert result.upload.bytes == 0
    assert result.isp == ""
    assert result.server.id == 0


def test_null_fields_keep_zero_values():
    result = parse_result(b'{"isp": null, "ping": null, "packetLoss": null, "server": {"id": null, "name": "SrvA"}}')
    assert result.isp == ""
    assert result.ping.latency == 0.0
    assert result.packet_loss == 0.0
    assert result.server.id == 0
    assert result.server.name == "SrvA"


def test_null_document_is_all_zero():
    result = parse_result(b"null")
    assert result.download.bandwidth == 0
    assert result.result.id == ""


def test_integer_json_numbers_are_accepted_for_floats():
    assert parse_result(b'{"ping": {"latency": 12}}').ping.latency == 12.0


@pytest.mark.parametrize("raw", [
    b"",
    b"not json",
    b"[1, 2]",
    b'{"ping": "fast"}',
    b'{"server": {"id": "x"}}',
    b'{"ping": {"latency": "12.3"}}',
    b'{"download": {"bandwidth": "5000000"}}',
    b'{"download": {"bandwidth": 5000000.5}}',
    b'{"isp": 5}',
    b'{"packetLoss": true}',
])
def test_bad_input_raises_input_error(raw):
    with pytest.raises(InputError) as exc_info:
        parse_result(raw)
    assert str(exc_info.value).startswith("Error parsing JSON: ")
    assert "\n" not in str(exc_info.value)


def test_always_six_metrics():
    results = [
        SpeedtestResult(),
        load_fixture(),
        parse_result(json.dumps({
            "ping": {"latency": -1.0, "jitter": -5.0},
            "download": {"bandwidth": 2**62, "bytes": -1},
            "packetLoss": 1e308,
        }).encode()),
    ]
    for result in results:
        metrics = build_metrics(result)
        assert list(metrics.keys()) == list(METRIC_NAMES)
        assert all(len(values) == 1 for values in metrics.values())


def test_ping_latency_labels():
    metrics = build_metrics(load_fixture())
    (ping,) = metrics["speedtest_ping_latency"]
    assert ping.value == 12.3
    assert ping.labels == {"jitter": "1.10", "low": "10.00", "high": "15.00"}


def test_bandwidth_metrics_carry_integer_labels():
    metrics = build_metrics(load_fixture())
    (download,) = metrics["speedtest_download_bandwidth"]
    assert download.value == 5000000.0
    assert download.labels == {"bytes": "62500000", "elapsed": "10000"}
    (upload,) = metrics["speedtest_upload_bandwidth"]
    assert upload.value == 2000000.0
    assert upload.labels == {"bytes": "25000000", "elapsed": "9500"}


def test_transfer_latency_uses_iqm():
    metrics = build_metrics(load_fixture())
    (download,) = metrics["speedtest_download_latency"]
    assert download.value == 20.456
    assert download.labels == {"jitter": "3.33", "low": "11.20", "high": "40.00", "iqm": "20.46"}
    (upload,) = metrics["speedtest_upload_latency"]
    assert upload.value == 30.0
    assert upload.labels["high"] == "55.50"


def test_packet_loss_has_no_labels():
    (loss,) = build_metrics(load_fixture())["speedtest_packet_loss"]
    assert loss.value == 0.01
    assert loss.labels == {}


def test_base_labels_then_extra_labels():
    labels = build_base_labels(load_fixture(), [("env", "prod")])
    assert labels == [
        ("isp", "Acme"),
        ("server_id", "42"),
        ("server_name", "SrvA"),
        ("result_id", "abc"),
        ("result_url", "http://x"),
        ("env", "prod"),
    ]


def test_colliding_extra_label_is_not_deduplicated():
    labels = build_base_labels(load_fixture(), [("isp", "Other")])
    assert [name for name, _ in labels].count("isp") == 2


def test_metric_value_holds_only_value_and_labels():
    first, second = MetricValue(1.0), MetricValue(2.0)
    first.labels["a"] = "b"
    assert second.labels == {}
    assert [f.name for f in dataclasses.fields(MetricValue)] == ["value", "labels"]
