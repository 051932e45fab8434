"""Integration tests for dated database selection and batch loading."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from core.config import CaldbConfig
from core.request_spec import load_request_batch
from core.types import DBRequest, FixedArray, ValueKind
from lookup.database import ParameterDatabase
from tests.fixture_paths import fixture_path, install_fixture


def _build_db_tree(root: Path) -> Path:
    db_dir = root / "DB"
    old_file = db_dir / "20200101" / "db_vdc.dat"
    old_file.parent.mkdir(parents=True)
    old_file.write_text(
        "L.vdc.nw = 300\n"
        "L.vdc.u1.tdc.res = 1.0e-9\n"
        "L.vdc.u1.wire.pos = 0 0 0 0 0 0\n"
        "L.vdc.u1.ttd.param = 0 0 0\n",
        encoding="utf-8",
    )
    install_fixture("db_vdc.dat", db_dir / "20210101")
    default_file = db_dir / "DEFAULT" / "db_hcal.dat"
    default_file.parent.mkdir()
    default_file.write_text("${arm}.hcal.gain = 1.5 \\\n  2.5\n", encoding="utf-8")
    return db_dir


def test_dated_directories_select_database_generation(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Each date should load from the matching database directory."""
    monkeypatch.chdir(tmp_path)
    _build_db_tree(tmp_path)
    database = ParameterDatabase(CaldbConfig())
    batch = load_request_batch(str(fixture_path("requests_vdc.yaml")))

    early = SimpleNamespace(nw=0, ttd_param=None)
    database.load_batch("vdc", datetime(2020, 6, 1), batch, here="VDC::Init", target=early)
    late = database.load_batch("vdc", datetime(2021, 7, 1), batch)

    assert early.nw == 300 and early.ttd_param == [[0.0, 0.0, 0.0]]
    assert late["nw"] == 400 and late["tdc.offset"] == 120


def test_default_directory_and_substitution(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Files only in DEFAULT should be found and lines expanded before lookup."""
    monkeypatch.chdir(tmp_path)
    db_dir = _build_db_tree(tmp_path)
    config = replace(CaldbConfig(), db_dir=db_dir, search_dirs=("missing",))

    def expand_arm(line: str) -> list[str]:
        return [line.replace("${arm}", "R")]

    database = ParameterDatabase(config, substitute=expand_arm)
    requests = [DBRequest(name="gain", kind=ValueKind.FLOAT, shape=FixedArray(count=2))]

    resolved = database.load("hcal", datetime(2022, 1, 1), requests, prefix="R.hcal.")

    assert resolved == {"gain": [1.5, 2.5]}
    candidates = database.candidates("hcal", datetime(2022, 1, 1))
    assert candidates[1:3] == [
        db_dir / "20210101" / "db_hcal.dat",
        db_dir / "DEFAULT" / "db_hcal.dat",
    ]
