"""Shared typed models.

This module defines immutable request models used by the lookup,
resolver, request-file, and CLI layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ValueKind(Enum):
    """Value kinds a database request can ask for."""

    DOUBLE = "double"
    FLOAT = "float"
    LONG = "long"
    ULONG = "ulong"
    INT = "int"
    UINT = "uint"
    SHORT = "short"
    USHORT = "ushort"
    CHAR = "char"
    UCHAR = "uchar"
    STRING = "string"
    OBJECT = "object"

    @property
    def is_numeric(self) -> bool:
        """Return whether values of this kind are arithmetic."""
        return self not in (ValueKind.STRING, ValueKind.OBJECT)


@dataclass(frozen=True)
class Scalar:
    """A single value."""


@dataclass(frozen=True)
class FixedArray:
    """Exactly ``count`` whitespace-separated values.

    Attributes:
        count: Required number of elements, at least 2.
    """

    count: int


@dataclass(frozen=True)
class Vector:
    """A variable-length array.

    Attributes:
        expected: Required length, or 0 to accept any length.
    """

    expected: int = 0


@dataclass(frozen=True)
class Matrix:
    """A rectangular matrix stored row-major.

    Attributes:
        columns: Number of columns used to reshape the flat value list.
    """

    columns: int


ValueShape = Union[Scalar, FixedArray, Vector, Matrix]


def shape_from_count(count: int) -> ValueShape:
    """Map a plain element count onto a destination shape.

    Counts of 0 and 1 mean a scalar; larger counts mean a fixed array.
    """
    if count < 2:
        return Scalar()
    return FixedArray(count=count)


@dataclass(frozen=True)
class DBRequest:
    """One named, typed parameter to load from a database file.

    Attributes:
        name: Key name relative to the batch prefix.
        kind: Requested value kind.
        shape: Destination shape.
        optional: Whether a missing key is acceptable.
        search: Per-item search depth; 0 defers to the batch search.
        description: Human description used in diagnostics.
        attribute: Destination attribute name; defaults to ``name``.
    """

    name: str
    kind: ValueKind = ValueKind.DOUBLE
    shape: ValueShape = Scalar()
    optional: bool = False
    search: int = 0
    description: str | None = None
    attribute: str | None = None

    @property
    def destination(self) -> str:
        """Return the attribute/result name this request writes to."""
        return self.attribute or self.name


@dataclass(frozen=True)
class RequestBatch:
    """An ordered request list resolved under one prefix.

    Attributes:
        prefix: Dot-terminated namespace prefix, possibly empty.
        search: Batch-level search depth.
        requests: Requests in resolution order.
    """

    prefix: str
    search: int
    requests: tuple[DBRequest, ...]
