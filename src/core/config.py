"""Runtime configuration model for caldb.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DB_DIR_ENV_VAR, DEFAULT_DEBUG_LEVEL, DEFAULT_SEARCH_DIRS
from core.errors import CaldbConfigError


@dataclass(frozen=True)
class CaldbConfig:
    """Validated runtime configuration.

    Attributes:
        db_dir: Optional override database directory, tried first.
        search_dirs: Fallback database directories in priority order.
        debug_level: 0 silent, 1 log opened files, 2 log every open attempt.
    """

    db_dir: Path | None = None
    search_dirs: tuple[str, ...] = DEFAULT_SEARCH_DIRS
    debug_level: int = DEFAULT_DEBUG_LEVEL

    @classmethod
    def from_env(cls) -> "CaldbConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            CaldbConfigError: If environment values are invalid.
        """
        db_dir_value = os.getenv(DB_DIR_ENV_VAR)
        search_dirs_value = os.getenv("CALDB_SEARCH_DIRS")
        debug_value = os.getenv("CALDB_DEBUG", str(DEFAULT_DEBUG_LEVEL))
        return cls(
            db_dir=Path(db_dir_value).expanduser() if db_dir_value else None,
            search_dirs=_parse_search_dirs(search_dirs_value),
            debug_level=_parse_debug_level(debug_value),
        )

    def directory_search_list(self) -> tuple[str, ...]:
        """Return database directories to try, override first."""
        if self.db_dir is None:
            return self.search_dirs
        return (str(self.db_dir), *self.search_dirs)


def _parse_search_dirs(raw_value: str | None) -> tuple[str, ...]:
    """Parse the comma-separated fallback directory list.

    Args:
        raw_value: Raw string from environment, or None.

    Returns:
        Directory names in priority order.

    Raises:
        CaldbConfigError: If the list is present but empty.
    """
    if raw_value is None:
        return DEFAULT_SEARCH_DIRS
    dirs = tuple(part.strip() for part in raw_value.split(",") if part.strip())
    if not dirs:
        raise CaldbConfigError(
            "Invalid CALDB_SEARCH_DIRS value: expected a comma-separated list "
            f"of directories, got '{raw_value}'. Unset it to use the defaults."
        )
    return dirs


def _parse_debug_level(raw_value: str) -> int:
    """Parse the debug level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed non-negative debug level.

    Raises:
        CaldbConfigError: If value is not a non-negative integer.
    """
    try:
        level = int(raw_value)
    except ValueError as error:
        raise CaldbConfigError(
            "Invalid CALDB_DEBUG value: "
            f"expected integer, got '{raw_value}'. "
            "Set CALDB_DEBUG to 0, 1 or 2."
        ) from error
    if level < 0:
        raise CaldbConfigError(
            f"Invalid CALDB_DEBUG value: expected non-negative integer, got {level}."
        )
    return level
