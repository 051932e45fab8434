"""Core constants used across caldb modules.

This module centralizes file-format and layout constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from datetime import datetime

DB_DIR_ENV_VAR = "DB_DIR"
DEFAULT_SEARCH_DIRS = ("DB", "db", ".")
DEFAULT_SUBDIR_NAME = "DEFAULT"
DATE_DIR_NAME_LENGTH = 8
DB_FILE_PREFIX = "db_"
DB_FILE_SUFFIX = ".dat"
PATH_SEPARATOR = "/"
COMMENT_CHAR = "#"
CONTINUATION_CHAR = "\\"
PREFIX_SEPARATOR = "."
DEFAULT_CONFIG_LABEL = "config"
EARLIEST_VALID_YEAR = 1995
EARLIEST_DB_DATE = datetime(EARLIEST_VALID_YEAR, 1, 1)
DATE_TAG_FORMATS = ("%Y-%m-%d %H:%M:%S %z", "%Y-%m-%d %H:%M:%S")
DEFAULT_DEBUG_LEVEL = 0
REQUEST_SPEC_VERSION = 1
