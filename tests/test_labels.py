#!/usr/bin/env python3
"""Tests for label string parsing."""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from speedtest_prom.errors import ConfigError, FormatError
from speedtest_prom.labels import (
    duplicate_label_names, invalid_label_names, labels_from_mapping, parse_labels
)


def test_empty_string_yields_no_labels():
    assert parse_labels("") == []


def test_pairs_keep_their_order():
    assert parse_labels("a=1,b=2") == [("a", "1"), ("b", "2")]


def test_whitespace_is_trimmed_on_both_sides():
    assert parse_labels(" a = 1 ") == [("a", "1")]
    assert parse_labels("env = prod , site=home ") == [("env", "prod"), ("site", "home")]


def test_empty_value_is_allowed():
    assert parse_labels("a=") == [("a", "")]


@pytest.mark.parametrize("label_str", ["a=1,b", "a", "a=1=2", "a=1,", ",a=1"])
def test_malformed_pairs_raise_format_error(label_str):
    with pytest.raises(FormatError) as exc_info:
        parse_labels(label_str)
    assert "invalid label format" in str(exc_info.value)


def test_format_error_is_a_config_error():
    with pytest.raises(ConfigError):
        parse_labels("oops")


def test_labels_from_mapping_stringifies():
    assert labels_from_mapping({"site": "home", "rack": 3}) == [("site", "home"), ("rack", "3")]


def test_invalid_and_duplicate_names():
    labels = [("isp", "x"), ("1bad", "y"), ("with-dash", "z"), ("isp", "again")]
    assert invalid_label_names(labels) == ["1bad", "with-dash"]
    assert duplicate_label_names(labels) == ["isp"]
    assert duplicate_label_names([("a", "1"), ("b", "2")]) == []
