"""Unit tests for YAML request batch parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import RequestSpecError
from core.request_spec import load_request_batch, parse_kind
from core.types import FixedArray, Matrix, Scalar, ValueKind, Vector
from tests.fixture_paths import fixture_path


def _write_spec(tmp_path: Path, content: str) -> str:
    spec_file = tmp_path / "requests.yaml"
    spec_file.write_text(content, encoding="utf-8")
    return str(spec_file)


def test_load_request_batch_parses_fixture() -> None:
    """Fixture request file should parse into typed requests."""
    batch = load_request_batch(str(fixture_path("requests_vdc.yaml")))

    assert batch.prefix == "L.vdc.u1." and batch.search == 1
    assert [request.name for request in batch.requests] == [
        "nw",
        "tdc.res",
        "tdc.offset",
        "wire.pos",
        "ttd.param",
    ]
    nw, tdc_res, tdc_offset, wire_pos, ttd_param = batch.requests
    assert nw.kind is ValueKind.INT and nw.description == "number of wires per plane"
    assert tdc_res.kind is ValueKind.DOUBLE and tdc_res.shape == Scalar()
    assert tdc_offset.optional
    assert wire_pos.shape == FixedArray(count=6)
    assert ttd_param.shape == Matrix(columns=3) and ttd_param.destination == "ttd_param"


def test_vector_shape_keeps_expected_count(tmp_path: Path) -> None:
    """Vector requests should carry their optional expected length."""
    spec_path = _write_spec(
        tmp_path,
        "requests:\n"
        "  - {name: a, kind: ushort, vector: true}\n"
        "  - {name: b, kind: ushort, vector: true, count: 4}\n"
        "  - {name: c, count: 1}\n",
    )

    batch = load_request_batch(spec_path)

    assert [request.shape for request in batch.requests] == [
        Vector(),
        Vector(expected=4),
        Scalar(),
    ]
    assert batch.prefix == "" and batch.search == 0


def test_prefix_must_end_with_dot(tmp_path: Path) -> None:
    """Prefixes without a trailing dot should be rejected."""
    spec_path = _write_spec(tmp_path, "prefix: L.vdc\nrequests:\n  - name: nw\n")

    with pytest.raises(RequestSpecError, match="must end with"):
        load_request_batch(spec_path)


def test_columns_cannot_combine_with_count(tmp_path: Path) -> None:
    """Matrix requests should not also declare an array count."""
    spec_path = _write_spec(tmp_path, "requests:\n  - {name: m, columns: 3, count: 6}\n")

    with pytest.raises(RequestSpecError):
        load_request_batch(spec_path)


def test_unknown_fields_are_rejected(tmp_path: Path) -> None:
    """Typos in request fields should fail fast."""
    spec_path = _write_spec(tmp_path, "requests:\n  - {name: nw, kinds: int}\n")

    with pytest.raises(RequestSpecError, match="unknown fields kinds"):
        load_request_batch(spec_path)


def test_empty_and_missing_files_are_rejected(tmp_path: Path) -> None:
    """Missing, empty and request-less files should all fail."""
    with pytest.raises(RequestSpecError, match="does not exist"):
        load_request_batch(str(tmp_path / "absent.yaml"))
    with pytest.raises(RequestSpecError, match="is empty"):
        load_request_batch(_write_spec(tmp_path, ""))
    with pytest.raises(RequestSpecError, match="requests"):
        load_request_batch(_write_spec(tmp_path, "prefix: L.\n"))


def test_invalid_yaml_is_rejected(tmp_path: Path) -> None:
    """YAML syntax errors should surface as request file errors."""
    with pytest.raises(RequestSpecError, match="YAML"):
        load_request_batch(_write_spec(tmp_path, "requests: [unclosed\n"))


def test_parse_kind_accepts_any_case() -> None:
    """Kind names should be case-insensitive."""
    assert parse_kind(" UChar ", "test") is ValueKind.UCHAR
    with pytest.raises(RequestSpecError, match="Unsupported kind"):
        parse_kind("complex", "test")
