"""Public SDK surface for caldb.

This module provides a stable import path for pipeline code.
It re-exports the database client, request models, and helpers.
"""

from __future__ import annotations

from core.config import CaldbConfig
from core.errors import (
    ArityMismatchError,
    CaldbError,
    ConversionError,
    DatabaseFileNotFoundError,
    DatabaseIOError,
    MissingRequiredError,
    ResolutionError,
    UnsupportedTypeError,
)
from core.request_spec import load_request_batch
from core.types import (
    DBRequest,
    FixedArray,
    Matrix,
    RequestBatch,
    Scalar,
    ValueKind,
    Vector,
    shape_from_count,
)
from dbfile.file_resolver import db_file_candidates, open_db_file
from dbfile.segment_seeker import seek_config, seek_date
from dbfile.stream import DatabaseStream
from lookup.conversion import parse_array, parse_matrix, parse_scalar
from lookup.database import ParameterDatabase
from lookup.request_resolver import ResolutionContext, resolve_requests
from lookup.value_lookup import load_value

__all__ = [
    "ArityMismatchError",
    "CaldbConfig",
    "CaldbError",
    "ConversionError",
    "DBRequest",
    "DatabaseFileNotFoundError",
    "DatabaseIOError",
    "DatabaseStream",
    "FixedArray",
    "Matrix",
    "MissingRequiredError",
    "ParameterDatabase",
    "RequestBatch",
    "ResolutionContext",
    "ResolutionError",
    "Scalar",
    "UnsupportedTypeError",
    "ValueKind",
    "Vector",
    "db_file_candidates",
    "load_request_batch",
    "load_value",
    "open_db_file",
    "parse_array",
    "parse_matrix",
    "parse_scalar",
    "resolve_requests",
    "seek_config",
    "seek_date",
    "shape_from_count",
]
