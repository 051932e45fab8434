"""Shared fixture path helpers for tests."""

from __future__ import annotations

import shutil
from pathlib import Path


def fixture_path(relative_path: str) -> Path:
    """Resolve a fixture path relative to tests/fixtures.

    Args:
        relative_path: Path under fixtures root.

    Returns:
        Absolute fixture path.
    """
    tests_root = Path(__file__).resolve().parent
    return tests_root / "fixtures" / relative_path


def install_fixture(relative_path: str, destination_dir: Path) -> Path:
    """Copy a fixture file into a test database directory.

    Args:
        relative_path: Path under fixtures root.
        destination_dir: Directory to copy into; created if missing.

    Returns:
        Path of the copied file.
    """
    destination_dir.mkdir(parents=True, exist_ok=True)
    source = fixture_path(relative_path)
    return Path(shutil.copy(source, destination_dir / source.name))
