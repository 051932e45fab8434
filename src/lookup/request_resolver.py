"""Batch resolution of prefixed database requests.

Each request name is looked up under the batch prefix. A missing key
may be retried one namespace level up at a time, as allowed by the
search depth:

* ``search < 0`` climbs at most ``abs(search)`` levels.
* ``search > 0`` climbs while the new level is at least ``search``,
  where the empty prefix is level 1.

Example for ``nw`` under ``L.vdc.u1.``: search -1 tries ``L.vdc.u1.nw``
and ``L.vdc.nw``; search 1 continues through ``L.nw`` and ``nw``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Sequence

from core.constants import PREFIX_SEPARATOR
from core.errors import (
    ArityMismatchError,
    ConversionError,
    MissingRequiredError,
    ResolutionError,
    UnsupportedTypeError,
)
from core.logging_config import get_logger
from core.types import DBRequest, FixedArray, Matrix, Scalar, ValueKind
from dbfile.stream import DatabaseStream
from lookup.conversion import parse_array, parse_matrix, parse_scalar
from lookup.value_lookup import TextSubstitution, load_value

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ResolutionContext:
    """Per-call diagnostic state for one resolution pass.

    Attributes:
        here: Calling method, e.g. ``"VDC::ReadDatabase"``.
        prefix: Prefix of the object being configured.
        substitute: Optional text-variable expansion hook.
    """

    here: str = ""
    prefix: str = ""
    substitute: TextSubstitution | None = None

    @property
    def scope(self) -> str:
        """Return the diagnostic scope label."""
        return scope_label(self.here, self.prefix)


def scope_label(method: str, prefix: str) -> str:
    """Format a diagnostic scope label.

    ``("Class::method", "L.vdc.")`` gives ``Class("L.vdc")::method``;
    ``("method", "L.vdc.")`` gives ``("L.vdc")::method``.
    """
    if not prefix:
        return method
    quoted = f'("{prefix.removesuffix(PREFIX_SEPARATOR)}")'
    class_name, separator, method_name = method.partition("::")
    if separator:
        return f"{class_name}{quoted}::{method_name}"
    return f"{quoted}::{method}"


def chop_prefix(prefix: str) -> tuple[str, int]:
    """Remove the trailing namespace level from a prefix.

    ``"L.vdc."`` becomes ``"L."``; a single-level prefix becomes ``""``.

    Returns:
        Shortened prefix and its number of dots.
    """
    if len(prefix) >= 2:
        pos = prefix.rfind(PREFIX_SEPARATOR, 0, len(prefix) - 1)
        if pos >= 0:
            chopped = prefix[: pos + 1]
            return chopped, chopped.count(PREFIX_SEPARATOR)
    return "", 0


def search_prefixes(prefix: str, search: int) -> Iterator[str]:
    """Yield the prefixes a missing key is tried under, nearest first."""
    yield prefix
    while search != 0 and prefix:
        chopped, dots = chop_prefix(prefix)
        if search > 0 and dots + 1 < search:
            return
        if search < 0:
            search += 1
        prefix = chopped
        yield prefix


def resolve_requests(
    stream: DatabaseStream,
    date: datetime,
    requests: Sequence[DBRequest],
    prefix: str = "",
    search: int = 0,
    context: ResolutionContext | None = None,
    target: object | None = None,
) -> dict[str, object]:
    """Resolve an ordered request batch against a database stream.

    Requests are processed in order. The first failure aborts the batch;
    values already assigned to ``target`` stay assigned.

    Args:
        stream: Open database stream.
        date: Reference date.
        requests: Requests in resolution order.
        prefix: Dot-terminated namespace prefix, possibly empty.
        search: Batch-level search depth.
        context: Diagnostic context; defaults to one scoped to ``prefix``.
        target: Optional object that receives values as attributes.

    Returns:
        Resolved values keyed by request destination. Optional requests
        that were not found are absent.

    Raises:
        MissingRequiredError: If a required key is not found.
        ConversionError: If a value cannot be converted.
        ArityMismatchError: If an array or matrix has the wrong size.
        UnsupportedTypeError: If a request kind/shape is not readable.
        DatabaseIOError: If the stream fails.
    """
    context = context or ResolutionContext(prefix=prefix)
    resolved: dict[str, object] = {}
    for index, request in enumerate(requests, 1):
        try:
            value = _resolve_request(stream, date, request, prefix, search, context)
        except ResolutionError as error:
            error.index = index
            _log_failure(error, request, context)
            raise
        if value is None:
            continue
        resolved[request.destination] = value
        if target is not None:
            setattr(target, request.destination, value)
    return resolved


def _resolve_request(
    stream: DatabaseStream,
    date: datetime,
    request: DBRequest,
    prefix: str,
    search: int,
    context: ResolutionContext,
) -> object | None:
    """Resolve one request, climbing the prefix tree while allowed."""
    _check_supported(request, prefix + request.name)
    effective_search = request.search or search
    searched_keys: list[str] = []
    for scope_prefix in search_prefixes(prefix, effective_search):
        key = scope_prefix + request.name
        searched_keys.append(key)
        value = _load_typed_value(stream, date, key, request, context)
        if value is not None:
            return value
    if request.optional:
        return None
    description = f" ({request.description})" if request.description else ""
    raise MissingRequiredError(
        f'Required key "{searched_keys[-1]}"{description} missing in the database. '
        f"Searched: {', '.join(searched_keys)}.",
        key=prefix + request.name,
    )


def _load_typed_value(
    stream: DatabaseStream,
    date: datetime,
    key: str,
    request: DBRequest,
    context: ResolutionContext,
) -> object | None:
    """Load and convert one key according to the request shape."""
    text = load_value(stream, date, key, context.substitute)
    if text is None:
        return None
    kind = request.kind
    shape = request.shape
    if isinstance(shape, Scalar):
        return parse_scalar(kind, text, key)
    if isinstance(shape, Matrix):
        return parse_matrix(kind, text, shape.columns, key)
    values = parse_array(kind, text, key)
    expected = shape.count if isinstance(shape, FixedArray) else shape.expected
    if expected > 0 and len(values) != expected:
        raise ArityMismatchError(
            f"Incorrect number of array elements found for key = {key}. "
            f"{expected} requested, {len(values)} found. Fix database.",
            key=key,
        )
    return values


def _check_supported(request: DBRequest, key: str) -> None:
    """Reject kind/shape combinations that cannot be read."""
    if request.kind.is_numeric:
        return
    if request.kind is not ValueKind.STRING or not isinstance(request.shape, Scalar):
        raise UnsupportedTypeError(
            f'Key "{key}": Reading of data type "{request.kind.value}" '
            f"as {type(request.shape).__name__} not implemented.",
            key=key,
        )


def _log_failure(error: ResolutionError, request: DBRequest, context: ResolutionContext) -> None:
    """Emit the structured diagnostic event for a failed request."""
    if isinstance(error, MissingRequiredError):
        event = "required_key_missing"
    elif isinstance(error, UnsupportedTypeError):
        event = "unsupported_value_type"
    elif isinstance(error, ArityMismatchError):
        if isinstance(request.shape, Matrix):
            event = "matrix_shape_mismatch"
        else:
            event = "array_size_mismatch"
    elif isinstance(error, ConversionError):
        event = "numeric_conversion_failed"
    else:
        event = "request_resolution_failed"
    _LOGGER.error(
        event,
        scope=context.scope,
        key=error.key,
        index=error.index,
        description=request.description,
        message=str(error),
    )
