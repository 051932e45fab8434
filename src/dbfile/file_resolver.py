"""Database file search and opening.

This module maps a bare database name and a date onto an ordered list
of candidate files across date-coded, DEFAULT, and flat directories.
"""

from __future__ import annotations

import bisect
from datetime import datetime
from pathlib import Path

from core.config import CaldbConfig
from core.constants import (
    DATE_DIR_NAME_LENGTH,
    DB_FILE_PREFIX,
    DB_FILE_SUFFIX,
    DEFAULT_SUBDIR_NAME,
    PATH_SEPARATOR,
)
from core.errors import DatabaseFileNotFoundError
from core.logging_config import get_logger
from dbfile.date_tags import to_local_naive
from dbfile.stream import DatabaseStream

_LOGGER = get_logger(__name__)


def db_file_candidates(
    name: str,
    date: datetime,
    config: CaldbConfig | None = None,
) -> list[Path]:
    """Build the database file search list for a name and date.

    Args:
        name: Bare database name (``vdc``) or an explicit path.
        date: Reference date used to pick a date-coded directory.
        config: Runtime configuration; read from the environment if omitted.

    Returns:
        Candidate paths in priority order. Empty if no database
        directory can be listed.
    """
    if not name:
        return []
    if PATH_SEPARATOR in name:
        return [Path(name)]
    config = config or CaldbConfig.from_env()
    db_dir = _find_database_directory(config.directory_search_list())
    if db_dir is None:
        _LOGGER.error(
            "db_directory_unavailable",
            searched=list(config.directory_search_list()),
        )
        return []
    date_dirs, has_default_dir = _scan_database_directory(db_dir)
    file_name = normalize_db_file_name(name)
    candidates = [Path(".") / file_name]
    date_dir = select_date_directory(date_dirs, to_local_naive(date))
    if date_dir is not None:
        candidates.append(db_dir / date_dir / file_name)
    if has_default_dir:
        candidates.append(db_dir / DEFAULT_SUBDIR_NAME / file_name)
    candidates.append(db_dir / file_name)
    return candidates


def open_db_file(
    name: str,
    date: datetime,
    config: CaldbConfig | None = None,
) -> DatabaseStream:
    """Open the first database file candidate that can be read.

    Args:
        name: Bare database name or explicit path.
        date: Reference date.
        config: Runtime configuration; read from the environment if omitted.

    Returns:
        Open stream; ``stream.path`` records which candidate was used.

    Raises:
        DatabaseFileNotFoundError: If no candidate can be opened.
    """
    config = config or CaldbConfig.from_env()
    for candidate in db_file_candidates(name, date, config):
        try:
            stream = DatabaseStream.open(candidate)
        except OSError:
            if config.debug_level > 1:
                _LOGGER.info("db_file_open_attempt", path=str(candidate), opened=False)
            continue
        if config.debug_level > 1:
            _LOGGER.info("db_file_open_attempt", path=str(candidate), opened=True)
        elif config.debug_level > 0:
            _LOGGER.info("db_file_opened", path=str(candidate))
        return stream
    _LOGGER.error("db_file_open_failed", name=name, date=date.isoformat())
    raise DatabaseFileNotFoundError(
        f"Cannot open database file {normalize_db_file_name(name)} for {date:%Y-%m-%d}. "
        "Check DB_DIR and the database directory layout."
    )


def normalize_db_file_name(name: str) -> str:
    """Return ``name`` with a ``db_`` prefix and ``.dat`` suffix."""
    file_name = name if name.startswith(DB_FILE_PREFIX) else DB_FILE_PREFIX + name
    if file_name.endswith("."):
        return file_name + DB_FILE_SUFFIX.lstrip(".")
    if not file_name.endswith(DB_FILE_SUFFIX):
        return file_name + DB_FILE_SUFFIX
    return file_name


def select_date_directory(date_dirs: list[str], date: datetime) -> str | None:
    """Pick the latest ``YYYYMMDD`` directory not after ``date``.

    The last directory is valid indefinitely.

    Args:
        date_dirs: Eight-digit directory names.
        date: Reference date.

    Returns:
        Selected directory name, or None if all start after ``date``.
    """
    ordered = sorted(date_dirs)
    position = bisect.bisect_right(ordered, f"{date:%Y%m%d}")
    if position == 0:
        return None
    return ordered[position - 1]


def _find_database_directory(search_list: tuple[str, ...]) -> Path | None:
    """Return the first directory in the search list that can be listed."""
    for dir_name in search_list:
        directory = Path(dir_name)
        try:
            next(directory.iterdir(), None)
        except OSError:
            continue
        return directory
    return None


def _scan_database_directory(db_dir: Path) -> tuple[list[str], bool]:
    """Collect date-coded subdirectories and detect a DEFAULT directory."""
    date_dirs: list[str] = []
    has_default_dir = False
    for entry in db_dir.iterdir():
        if not entry.is_dir():
            continue
        if _is_date_dir_name(entry.name):
            date_dirs.append(entry.name)
        elif entry.name == DEFAULT_SUBDIR_NAME:
            has_default_dir = True
    return date_dirs, has_default_dir


def _is_date_dir_name(dir_name: str) -> bool:
    """Return whether a directory name looks like ``YYYYMMDD``."""
    return (
        len(dir_name) == DATE_DIR_NAME_LENGTH and dir_name.isascii() and dir_name.isdigit()
    )
