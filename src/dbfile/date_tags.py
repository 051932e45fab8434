"""Date and section tag parsing.

This module recognizes ``[ YYYY-MM-DD hh:mm:ss ]`` date tags, with an
optional timezone offset, and generic ``[ ... ]`` section markers.
"""

from __future__ import annotations

from datetime import datetime
import re

from core.constants import DATE_TAG_FORMATS, EARLIEST_VALID_YEAR
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)
_SECTION_MARKER = re.compile(r"\[[^\]].*\]")


def parse_date_tag(line: str, warn: bool = True) -> datetime | None:
    """Parse a date tag embedded in a line.

    Timestamps with an explicit offset are converted to naive local
    time; timestamps without one are taken as local time already.

    Args:
        line: Logical or physical database line.
        warn: Whether to log a warning for malformed date tags.

    Returns:
        Naive local timestamp, or None if the line holds no valid tag.
    """
    left = line.find("[")
    if left < 0 or left >= len(line) - 12:
        return None
    right = line.find("]", left)
    if right < 0 or right <= left + 11:
        return None
    content = line[left + 1 : right].strip()
    tag_date = _parse_timestamp(content)
    if tag_date is None or tag_date.year < EARLIEST_VALID_YEAR:
        if warn and content[:1].isdigit():
            _LOGGER.warning("invalid_date_tag", line=line)
        return None
    return tag_date


def is_section_tag(line: str) -> bool:
    """Return whether the first ``[`` in line opens a non-empty ``[...]`` marker."""
    left = line.find("[")
    if left < 0:
        return False
    return _SECTION_MARKER.match(line, left) is not None


def dates_differ(first: datetime, second: datetime) -> bool:
    """Return whether database contents may differ between two dates."""
    return to_local_naive(first) != to_local_naive(second)


def to_local_naive(value: datetime) -> datetime:
    """Convert an offset-aware datetime to naive local time.

    Naive values are returned unchanged; they are taken as local time.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _parse_timestamp(content: str) -> datetime | None:
    """Parse SQL-style timestamp text, with or without an offset."""
    for date_format in DATE_TAG_FORMATS:
        try:
            parsed = datetime.strptime(content, date_format)
        except ValueError:
            continue
        return to_local_naive(parsed)
    return None
