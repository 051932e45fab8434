"""Positioned line cursor over a database text stream.

This module wraps a text handle with save/restore positioning and
one-line pushback so parsers can read speculatively.
"""

from __future__ import annotations

import io
from pathlib import Path
from types import TracebackType
from typing import TextIO

from core.errors import DatabaseIOError


class DatabaseStream:
    """Line cursor over an open database file.

    Lines are returned without their newline and with tabs converted
    to spaces. Stream failures surface as ``DatabaseIOError``.
    """

    def __init__(self, handle: TextIO, path: Path | None = None) -> None:
        self._handle = handle
        self._path = path
        self._line_start: int | None = None
        self._origin = 0

    @classmethod
    def open(cls, path: Path) -> "DatabaseStream":
        """Open a database file for reading.

        Raises:
            OSError: If the file cannot be opened.
        """
        handle = open(path, "r", encoding="utf-8", errors="replace")
        return cls(handle, path=path)

    @classmethod
    def from_text(cls, text: str, path: Path | None = None) -> "DatabaseStream":
        """Build an in-memory stream from database text."""
        return cls(io.StringIO(text), path=path)

    @property
    def path(self) -> Path | None:
        """Return the file path this stream was opened from, if any."""
        return self._path

    @property
    def name(self) -> str:
        """Return a printable stream name for diagnostics."""
        return str(self._path) if self._path is not None else "<stream>"

    def read_line(self) -> str | None:
        """Read the next physical line, or None at end of stream."""
        start = self.tell()
        try:
            raw_line = self._handle.readline()
        except (OSError, ValueError) as error:
            raise DatabaseIOError(
                f"Failed to read database stream {self.name}: {error}. "
                "Check the file and retry."
            ) from error
        if raw_line == "":
            return None
        self._line_start = start
        return raw_line.rstrip("\r\n").replace("\t", " ")

    def push_back(self) -> None:
        """Rewind to the start of the most recently read line."""
        if self._line_start is None:
            raise DatabaseIOError(
                f"Cannot push back on database stream {self.name}: no line was read."
            )
        self.seek(self._line_start)
        self._line_start = None

    def tell(self) -> int:
        """Return the current stream position."""
        try:
            return self._handle.tell()
        except (OSError, ValueError) as error:
            raise DatabaseIOError(
                f"Failed to query position of database stream {self.name}: {error}."
            ) from error

    def seek(self, position: int) -> None:
        """Restore a position previously returned by ``tell``."""
        try:
            self._handle.seek(position)
        except (OSError, ValueError) as error:
            raise DatabaseIOError(
                f"Failed to reposition database stream {self.name}: {error}."
            ) from error

    def anchor(self) -> None:
        """Make the current position the target of later rewinds."""
        self._origin = self.tell()

    def rewind(self) -> None:
        """Return to the anchored position, the beginning by default."""
        self.seek(self._origin)
        self._line_start = None

    def close(self) -> None:
        """Close the underlying handle."""
        self._handle.close()

    def __enter__(self) -> "DatabaseStream":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
