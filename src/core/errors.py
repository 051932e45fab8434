"""Caldb exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class CaldbError(Exception):
    """Base exception for all caldb failures."""


class CaldbConfigError(CaldbError):
    """Raised for invalid runtime configuration."""


class DatabaseIOError(CaldbError):
    """Raised when a database stream cannot be read or positioned."""


class DatabaseFileNotFoundError(DatabaseIOError):
    """Raised when no candidate database file can be opened."""


class RequestSpecError(CaldbError):
    """Raised for invalid or unsupported request batch files."""


class ResolutionError(CaldbError):
    """Base class for failures while resolving one database request.

    Attributes:
        key: Fully prefixed database key being resolved.
        index: One-based position of the request in its batch, if known.
    """

    def __init__(self, message: str, key: str, index: int | None = None) -> None:
        super().__init__(message)
        self.key = key
        self.index = index


class ConversionError(ResolutionError):
    """Raised when value text cannot be converted to the requested kind."""

    def __init__(self, key: str, text: str, index: int | None = None) -> None:
        super().__init__(
            f'Numerical conversion error: {key} = "{text}". '
            "Fix the value in the database file.",
            key=key,
            index=index,
        )
        self.text = text


class ArityMismatchError(ResolutionError):
    """Raised when an array or matrix value has the wrong element count."""


class UnsupportedTypeError(ResolutionError):
    """Raised when a request declares a kind/shape the engine cannot read."""


class MissingRequiredError(ResolutionError):
    """Raised when a required key is absent from every searched scope."""
