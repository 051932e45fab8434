"""Positioning streams at configuration and date segments.

Large database files can be split into blocks introduced by
``[ config=name ]`` markers or by date tags. These helpers move a
stream to the start of such a block, or leave it where it was.
"""

from __future__ import annotations

from datetime import datetime

from core.constants import COMMENT_CHAR, DEFAULT_CONFIG_LABEL, EARLIEST_DB_DATE
from dbfile.date_tags import is_section_tag, parse_date_tag, to_local_naive
from dbfile.stream import DatabaseStream


def seek_config(
    stream: DatabaseStream,
    tag: str,
    label: str = DEFAULT_CONFIG_LABEL,
    end_on_tag: bool = False,
) -> bool:
    """Move the stream just past a ``[ label=tag ]`` marker.

    Whitespace inside marker lines is ignored. With an empty label the
    marker is ``[ tag ]``.

    Args:
        stream: Stream positioned where the search starts.
        tag: Configuration name to find.
        label: Marker label, ``config`` by default.
        end_on_tag: Stop at the first other section marker.

    Returns:
        True if found; otherwise False with the position unchanged.

    Raises:
        DatabaseIOError: If the stream cannot be read or repositioned.
    """
    if not tag:
        return False
    opener = f"[{label}=" if label else "["
    start = stream.tell()
    while True:
        raw_line = stream.read_line()
        if raw_line is None:
            break
        if _is_skippable(raw_line):
            continue
        line = "".join(raw_line.split())
        left = line.find(opener)
        if left >= 0 and left + len(opener) < len(line):
            right = line.find("]", left + len(opener))
            if right < 0:
                continue
            if line[left + len(opener) : right] == tag:
                return True
        elif end_on_tag and is_section_tag(raw_line):
            break
    stream.seek(start)
    return False


def seek_date(stream: DatabaseStream, date: datetime, end_on_tag: bool = False) -> bool:
    """Move the stream just past the latest date tag not after ``date``.

    Args:
        stream: Stream positioned where the search starts.
        date: Reference date.
        end_on_tag: Stop at the first section marker that is not a date tag.

    Returns:
        True if a qualifying tag was found; otherwise False with the
        position unchanged.

    Raises:
        DatabaseIOError: If the stream cannot be read or repositioned.
    """
    date = to_local_naive(date)
    start = stream.tell()
    best_date = EARLIEST_DB_DATE
    best_position: int | None = None
    while True:
        raw_line = stream.read_line()
        if raw_line is None:
            break
        if _is_skippable(raw_line):
            continue
        tag_date = parse_date_tag(raw_line, warn=False)
        if tag_date is not None and best_date <= tag_date <= date:
            best_date = tag_date
            best_position = stream.tell()
        elif end_on_tag and is_section_tag(raw_line):
            break
    stream.seek(start if best_position is None else best_position)
    return best_position is not None


def _is_skippable(raw_line: str) -> bool:
    """Return whether a physical line is blank or a comment."""
    return len(raw_line) < 1 or raw_line.startswith(COMMENT_CHAR)
