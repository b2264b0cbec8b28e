from __future__ import annotations

import math

import pytest

from tubeloop.utils.timestamps import format_editable, format_time, parse_timestamp, round_seconds


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "00:00"),
        (59.99, "00:59"),
        (61.5, "01:01"),
        (3599, "59:59"),
        (3600, "01:00:00"),
        (3725.9, "01:02:05"),
        (-4, "00:00"),
        (None, "00:00"),
        (math.nan, "00:00"),
        (math.inf, "00:00"),
    ],
)
def test_format_time(seconds, expected: str) -> None:
    assert format_time(seconds) == expected


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "00:00"),
        (5, "00:05"),
        (65.5, "01:05.50"),
        (65.05, "01:05.05"),
        (59.999, "01:00"),
        (3725.25, "62:05.25"),
        (-1, "00:00"),
        (None, ""),
        (math.nan, ""),
    ],
)
def test_format_editable(seconds, expected: str) -> None:
    assert format_editable(seconds) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("42", 42.0),
        ("00:10", 10.0),
        ("  7.5 ", 7.5),
        (".25", 0.25),
        ("1:05", 65.0),
        ("01:05.50", 65.5),
        ("1:02:03", 3723.0),
        ("1:02:03.25", 3723.25),
        ("0:0:0:10", 10.0),
        ("-3", 0.0),
    ],
)
def test_parse_timestamp_valid(text: str, expected: float) -> None:
    assert parse_timestamp(text) == expected


@pytest.mark.parametrize(
    "text",
    [None, "", "   ", "abc", "1:", ":30", "1::2", "1:a", "1.5:30", "1e3", "12 34", "1:2x"],
)
def test_parse_timestamp_invalid(text) -> None:
    assert parse_timestamp(text) is None


@pytest.mark.parametrize("seconds", [0, 1.23, 59.99, 60, 61.01, 754.5, 3599.99, 3725.25])
def test_editable_text_parses_back_to_rounded_value(seconds: float) -> None:
    assert parse_timestamp(format_editable(seconds)) == round_seconds(seconds)
