from __future__ import annotations

from vidshelf.formatting import (
    format_duration,
    format_file_size,
    format_rating,
    format_resolution,
    format_timestamp,
)


def test_format_duration() -> None:
    assert format_duration(0) == "00:00:00"
    assert format_duration(59.9) == "00:00:59"
    assert format_duration(3725) == "01:02:05"


def test_format_timestamp() -> None:
    assert format_timestamp(5) == "0:05"
    assert format_timestamp(125.4) == "2:05"
    assert format_timestamp(3725) == "1:02:05"


def test_format_file_size() -> None:
    assert format_file_size(0) == "0 B"
    assert format_file_size(512) == "512 B"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(3 * 1024**3) == "3 GB"


def test_format_resolution() -> None:
    assert format_resolution(1920, 1080) == "1920x1080"
    assert format_resolution(0, 1080) == "-"


def test_format_rating() -> None:
    assert format_rating(3) == "★★★☆☆"
    assert format_rating(0) == "☆☆☆☆☆"
    assert format_rating(9) == "★★★★★"
