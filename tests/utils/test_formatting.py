from datetime import UTC, datetime

import pytest
from net_inspector.utils.formatting import (
    format_byte_count,
    format_duration,
    format_timestamp,
    join_description,
    truncate,
)


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (None, ""),
        (0.0421, "42 ms"),
        (0.9994, "999 ms"),
        (1.5, "1.50 s"),
        (12.346, "12.35 s"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


@pytest.mark.parametrize(
    "byte_count, expected",
    [
        (0, "0 bytes"),
        (4, "4 bytes"),
        (1023, "1023 bytes"),
        (1536, "1.5 KB"),
        (5 * 1024 * 1024, "5.0 MB"),
    ],
)
def test_format_byte_count(byte_count, expected):
    assert format_byte_count(byte_count) == expected


def test_format_timestamp_uses_format():
    moment = datetime(2024, 5, 17, 12, 30, 45, tzinfo=UTC)
    assert format_timestamp(moment, "%Y") == "2024"


def test_truncate_short_text_is_unchanged():
    assert truncate("ping", 10) == "ping"


def test_truncate_long_text_ends_with_ellipsis():
    result = truncate("abcdefghij", 5)
    assert result == "abcd…"
    assert len(result) == 5


def test_truncate_collapses_whitespace():
    assert truncate("line one\n  line two", 50) == "line one line two"


def test_join_description_skips_empty_parts():
    assert join_description("GET", "", None, "200") == "GET · 200"
