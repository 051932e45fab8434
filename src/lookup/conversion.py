"""Typed conversion of database value text.

Values are whitespace-separated tokens. Each token must be a complete
number of the requested kind and fit that kind's numeric range; a
value never silently wraps or truncates.
"""

from __future__ import annotations

import math
import re
from typing import Union

import numpy as np

from core.errors import ArityMismatchError, ConversionError, UnsupportedTypeError
from core.types import ValueKind

_INTEGER_TOKEN = re.compile(r"[+-]?[0-9]+")
_FLOAT_TOKEN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_NONZERO_MANTISSA = re.compile(r"[^eE]*[1-9]")
_NUMERIC_TYPES: dict[ValueKind, type[np.generic]] = {
    ValueKind.DOUBLE: np.float64,
    ValueKind.FLOAT: np.float32,
    ValueKind.LONG: np.int64,
    ValueKind.ULONG: np.uint64,
    ValueKind.INT: np.int32,
    ValueKind.UINT: np.uint32,
    ValueKind.SHORT: np.int16,
    ValueKind.USHORT: np.uint16,
    ValueKind.CHAR: np.int8,
    ValueKind.UCHAR: np.uint8,
}

Number = Union[int, float]


def parse_scalar(kind: ValueKind, text: str, key: str = "") -> Number | str:
    """Convert the first token of ``text`` to a single value.

    ``ValueKind.STRING`` returns the text unchanged.

    Raises:
        ConversionError: If the token is malformed or out of range.
        UnsupportedTypeError: If ``kind`` cannot be converted.
    """
    if kind is ValueKind.STRING:
        return text
    tokens = text.split()
    if not tokens:
        raise ConversionError(key, text)
    return _convert_token(kind, tokens[0], key, text)


def parse_array(kind: ValueKind, text: str, key: str = "") -> list[Number]:
    """Convert every whitespace-separated token of ``text``.

    Raises:
        ConversionError: If any token fails, or the text is empty.
        UnsupportedTypeError: If ``kind`` is not numeric.
    """
    tokens = text.split()
    if not tokens:
        _numeric_type(kind, key)
        raise ConversionError(key, text)
    return [_convert_token(kind, token, key, text) for token in tokens]


def parse_matrix(
    kind: ValueKind,
    text: str,
    columns: int,
    key: str = "",
) -> list[list[Number]]:
    """Convert ``text`` to rows of ``columns`` values, filled row-major.

    Raises:
        ArityMismatchError: If the element count is not a multiple of
            ``columns``.
        ConversionError: If any token fails.
        UnsupportedTypeError: If ``kind`` is not numeric.
    """
    if columns < 1:
        raise ArityMismatchError(
            f"Invalid matrix column count {columns} for key {key}. "
            "Request at least one column.",
            key=key,
        )
    values = parse_array(kind, text, key)
    if len(values) % columns != 0:
        raise ArityMismatchError(
            f"Number of matrix elements ({len(values)}) for key {key} is not evenly "
            f"divisible by the requested number of columns ({columns}). Fix the database!",
            key=key,
        )
    return [values[start : start + columns] for start in range(0, len(values), columns)]


def _convert_token(kind: ValueKind, token: str, key: str, text: str) -> Number:
    """Convert one token, checking syntax and the kind's range."""
    numeric_type = _numeric_type(kind, key)
    if np.issubdtype(numeric_type, np.integer):
        if _INTEGER_TOKEN.fullmatch(token) is None:
            raise ConversionError(key, text)
        integer_value = int(token)
        integer_limits = np.iinfo(numeric_type)
        if not int(integer_limits.min) <= integer_value <= int(integer_limits.max):
            raise ConversionError(key, text)
        return integer_value
    if _FLOAT_TOKEN.fullmatch(token) is None:
        raise ConversionError(key, text)
    float_value = float(token)
    float_limits = np.finfo(numeric_type)
    if not math.isfinite(float_value) or abs(float_value) > float(float_limits.max):
        raise ConversionError(key, text)
    converted = float(numeric_type(float_value))
    # Underflow: a non-zero token that lands below the normal range, or on zero.
    if _NONZERO_MANTISSA.match(token) and abs(converted) < float(float_limits.smallest_normal):
        raise ConversionError(key, text)
    return converted


def _numeric_type(kind: ValueKind, key: str) -> type[np.generic]:
    """Return the numpy scalar type for a numeric kind."""
    if not kind.is_numeric:
        raise UnsupportedTypeError(
            f'Key "{key}": Reading of data type "{kind.value}" as a number is not implemented.',
            key=key,
        )
    return _NUMERIC_TYPES[kind]
