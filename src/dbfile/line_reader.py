"""Logical line assembly for flat-file databases.

This module turns physical lines into logical lines: comments are
removed, backslash continuations are joined, and a ``key = value``
line absorbs the following non-assignment lines up to a blank line.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import COMMENT_CHAR, CONTINUATION_CHAR
from dbfile.stream import DatabaseStream


@dataclass(frozen=True)
class _Fragment:
    """One physical line after comment and continuation handling."""

    text: str
    comment: bool = False
    continued: bool = False
    leading_space: bool = False
    trailing_space: bool = False


def is_assignment(text: str) -> bool:
    """Return whether text has the form ``<key> = [value]``.

    Comparison operators ``==``, ``!=``, ``<=`` and ``>=`` are not
    assignments, and neither is an ``=`` with nothing before it.
    """
    pos = text.find("=")
    if pos < 0:
        return False
    if not text[:pos].strip():
        return False
    return not (text[pos - 1] in "!<>" or text[pos + 1 : pos + 2] == "=")


def read_logical_line(stream: DatabaseStream) -> str | None:
    """Read the next non-empty logical line from a database stream.

    Args:
        stream: Positioned database stream.

    Returns:
        Assembled line without comments, continuation marks, tabs or
        surrounding whitespace, or None once the stream has no more data.

    Raises:
        DatabaseIOError: If the stream cannot be read.
    """
    line = ""
    maybe_continued = False
    while True:
        raw_line = stream.read_line()
        if raw_line is None:
            break
        fragment = _prepare_fragment(raw_line)
        text = fragment.text
        if not line and not text:
            continue
        assignment = False
        if text:
            assignment = is_assignment(text)
            if maybe_continued and assignment:
                # Start of the next logical line; leave it for the next call.
                stream.push_back()
                break
        elif fragment.continued or fragment.comment:
            continue
        else:
            break
        if not line and not fragment.continued and assignment:
            maybe_continued = True
        if maybe_continued or (fragment.trailing_space and fragment.continued):
            text += " "
        if fragment.leading_space and line and not line[-1].isspace():
            line += " "
        line += text
        if not (fragment.continued or maybe_continued):
            break
    if maybe_continued and line.endswith(" "):
        line = line[:-1]
    return line or None


def _prepare_fragment(raw_line: str) -> _Fragment:
    """Strip comment/continuation tails and surrounding whitespace."""
    if not raw_line:
        return _Fragment(text="")
    if raw_line.startswith(COMMENT_CHAR):
        return _Fragment(text="", comment=True)
    comment_pos = raw_line.find(COMMENT_CHAR)
    continuation_pos = raw_line.find(CONTINUATION_CHAR)
    cut_positions = [pos for pos in (comment_pos, continuation_pos) if pos >= 0]
    comment = continued = False
    text = raw_line
    if cut_positions:
        cut = min(cut_positions)
        if cut == continuation_pos:
            continued = True
        else:
            comment = True
        text = raw_line[:cut]
    leading_space = bool(text) and text[0].isspace()
    trailing_space = bool(text) and text[-1].isspace()
    return _Fragment(
        text=text.strip(),
        comment=comment,
        continued=continued,
        leading_space=leading_space,
        trailing_space=trailing_space,
    )
