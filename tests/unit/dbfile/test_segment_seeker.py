"""Unit tests for configuration and date segment seeking."""

from __future__ import annotations

from datetime import datetime

from dbfile.segment_seeker import seek_config, seek_date
from dbfile.stream import DatabaseStream

_SEGMENTED_TEXT = (
    "header = 1\n"
    "# [ config=commented ]\n"
    "[ config=production ]\n"
    "gain = 2\n"
    "[ version=B ]\n"
    "[ config=cosmics ]\n"
    "gain = 3\n"
)


def test_seek_config_positions_after_marker() -> None:
    """A matching marker should leave the stream on the following line."""
    stream = DatabaseStream.from_text(_SEGMENTED_TEXT)

    assert seek_config(stream, "cosmics")
    assert stream.read_line() == "gain = 3"


def test_seek_config_ignores_whitespace_inside_marker() -> None:
    """Markers should match regardless of spacing."""
    stream = DatabaseStream.from_text("[   config =  production  ]\nvalue = 1\n")

    assert seek_config(stream, "production")
    assert stream.read_line() == "value = 1"


def test_seek_config_restores_position_when_not_found() -> None:
    """An unsuccessful search should leave the position untouched."""
    stream = DatabaseStream.from_text(_SEGMENTED_TEXT)
    stream.read_line()

    found = seek_config(stream, "calibration")

    assert not found and stream.read_line() == "# [ config=commented ]"


def test_seek_config_skips_commented_markers() -> None:
    """Markers in comment lines should not match."""
    stream = DatabaseStream.from_text(_SEGMENTED_TEXT)

    assert not seek_config(stream, "commented")


def test_seek_config_end_on_tag_stops_at_other_marker() -> None:
    """With end_on_tag, a foreign marker should end the search."""
    stream = DatabaseStream.from_text(_SEGMENTED_TEXT)

    found = seek_config(stream, "cosmics", end_on_tag=True)

    assert not found and stream.read_line() == "header = 1"


def test_seek_config_with_custom_and_empty_label() -> None:
    """Labels should select [ label=tag ] or bare [ tag ] markers."""
    stream = DatabaseStream.from_text("[ version=B ]\nx = 1\n[ cosmics ]\ny = 2\n")

    assert seek_config(stream, "B", label="version")
    assert seek_config(stream, "cosmics", label="")
    assert stream.read_line() == "y = 2"


def test_seek_date_positions_after_latest_qualifying_tag() -> None:
    """The latest date tag not after the request should be selected."""
    stream = DatabaseStream.from_text(
        "[ 2019-01-01 00:00:00 ]\na = 1\n"
        "[ 2020-01-01 00:00:00 ]\na = 2\n"
        "[ 2021-01-01 00:00:00 ]\na = 3\n"
    )

    assert seek_date(stream, datetime(2020, 6, 1))
    assert stream.read_line() == "a = 2"


def test_seek_date_restores_position_without_match() -> None:
    """Without a qualifying tag the original position should be kept."""
    stream = DatabaseStream.from_text("a = 0\n[ 2021-01-01 00:00:00 ]\na = 3\n")

    assert not seek_date(stream, datetime(2020, 6, 1))
    assert stream.read_line() == "a = 0"


def test_seek_date_end_on_tag_stops_at_config_marker() -> None:
    """With end_on_tag, a non-date marker should end the date search."""
    stream = DatabaseStream.from_text(
        "[ 2019-01-01 00:00:00 ]\na = 1\n[ config=other ]\n[ 2020-01-01 00:00:00 ]\na = 2\n"
    )

    assert seek_date(stream, datetime(2020, 6, 1), end_on_tag=True)
    assert stream.read_line() == "a = 1"
