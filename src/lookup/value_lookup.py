"""Effective value lookup in a time-versioned database stream.

Database files record history by appending date-tagged blocks. An
assignment is in effect from its governing date tag onward, so the
value for a date is the last assignment seen whose tag is not later
than that date and not earlier than the tag of the previous match.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Sequence

from core.constants import EARLIEST_DB_DATE
from dbfile.date_tags import parse_date_tag, to_local_naive
from dbfile.line_reader import is_assignment, read_logical_line
from dbfile.stream import DatabaseStream

TextSubstitution = Callable[[str], Sequence[str]]


def split_assignment(line: str) -> tuple[str, str] | None:
    """Split a ``key = value`` line into trimmed key and value.

    Returns:
        Key/value pair, or None if the line is not an assignment.
    """
    if not is_assignment(line):
        return None
    key, _, value = line.partition("=")
    return key.strip(), value.strip()


def load_value(
    stream: DatabaseStream,
    date: datetime,
    key: str,
    substitute: TextSubstitution | None = None,
) -> str | None:
    """Find the text value of ``key`` in effect at ``date``.

    The whole stream is scanned from the beginning on every call. Keys
    are compared exactly, including case.

    Args:
        stream: Database stream; it is rewound before scanning.
        date: Reference date; offset-aware values are converted to local time.
        key: Fully prefixed key.
        substitute: Optional text-variable expansion applied to each
            logical line; every returned line is interpreted.

    Returns:
        Value text of the effective assignment, or None if not found.

    Raises:
        DatabaseIOError: If the stream cannot be read.
    """
    date = to_local_naive(date)
    governing_date = EARLIEST_DB_DATE
    match_date = EARLIEST_DB_DATE
    ignoring = False
    value: str | None = None
    stream.rewind()
    while True:
        logical_line = read_logical_line(stream)
        if logical_line is None:
            break
        lines = substitute(logical_line) if substitute is not None else (logical_line,)
        for line in lines:
            if not ignoring:
                assignment = split_assignment(line)
                if assignment is not None:
                    if assignment[0] == key:
                        # Keep scanning: a later assignment in a valid block wins.
                        value = assignment[1]
                        match_date = governing_date
                    continue
            tag_date = parse_date_tag(line)
            if tag_date is not None:
                governing_date = tag_date
                ignoring = governing_date > date or governing_date < match_date
    return value
