"""Caldb CLI entry points.
This module exposes commands to inspect and query parameter databases.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from core.config import CaldbConfig
from core.constants import DEFAULT_CONFIG_LABEL
from core.errors import CaldbError
from core.request_spec import load_request_batch
from core.types import DBRequest, Matrix, ValueKind, Vector, shape_from_count
from dbfile.date_tags import to_local_naive
from dbfile.segment_seeker import seek_config
from lookup.database import ParameterDatabase


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="caldb", description="Parameter database CLI")
    parser.add_argument("--db-dir", help="Override DB_DIR for this command")
    parser.add_argument(
        "--date",
        type=_parse_date,
        default=None,
        help="Reference time, 'YYYY-MM-DD[ hh:mm:ss]' (default: now)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_files_command(subparsers)
    _add_get_command(subparsers)
    _add_resolve_command(subparsers)
    _add_seek_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the caldb CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    date = args.date or datetime.now().replace(microsecond=0)
    try:
        database = _build_database(args.db_dir)
        if args.command == "files":
            return _run_files_command(database, date, args)
        if args.command == "get":
            return _run_get_command(database, date, args)
        if args.command == "resolve":
            return _run_resolve_command(database, date, args)
        if args.command == "seek":
            return _run_seek_command(database, date, args)
    except CaldbError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_database(db_dir: str | None) -> ParameterDatabase:
    """Build SDK client with optional database-directory override.

    Args:
        db_dir: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = CaldbConfig.from_env()
    if db_dir:
        config = replace(config, db_dir=Path(db_dir).expanduser())
    return ParameterDatabase(config)


def _run_files_command(
    database: ParameterDatabase,
    date: datetime,
    args: argparse.Namespace,
) -> int:
    """Handle files command.

    Args:
        database: SDK client.
        date: Reference date.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    candidates = database.candidates(args.name, date)
    for candidate in candidates:
        marker = "*" if candidate.is_file() else "-"
        print(f"{marker}\t{candidate}")
    return 0 if candidates else 1


def _run_get_command(
    database: ParameterDatabase,
    date: datetime,
    args: argparse.Namespace,
) -> int:
    """Handle get command.

    Args:
        database: SDK client.
        date: Reference date.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    kind = ValueKind(args.kind)
    if args.columns:
        shape = Matrix(columns=args.columns)
    elif args.vector:
        shape = Vector(expected=args.count)
    else:
        shape = shape_from_count(args.count)
    request = DBRequest(name=args.key, kind=kind, shape=shape)
    values = database.load(args.name, date, [request], search=args.search, here="caldb get")
    print(_format_value(values[request.destination]))
    return 0


def _run_resolve_command(
    database: ParameterDatabase,
    date: datetime,
    args: argparse.Namespace,
) -> int:
    """Handle resolve command.

    Args:
        database: SDK client.
        date: Reference date.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    batch = load_request_batch(args.requests)
    if args.prefix is not None:
        batch = replace(batch, prefix=args.prefix)
    if args.search is not None:
        batch = replace(batch, search=args.search)
    values = database.load_batch(args.name, date, batch, here="caldb resolve")
    for request in batch.requests:
        if request.destination in values:
            print(f"{batch.prefix}{request.name}={_format_value(values[request.destination])}")
    return 0


def _run_seek_command(
    database: ParameterDatabase,
    date: datetime,
    args: argparse.Namespace,
) -> int:
    """Handle seek command.

    Args:
        database: SDK client.
        date: Reference date.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    with database.open(args.name, date) as stream:
        found = seek_config(stream, args.tag, label=args.label, end_on_tag=args.end_on_tag)
        print(f"path={stream.path}")
        print(f"found={'yes' if found else 'no'}")
    return 0 if found else 1


def _format_value(value: object) -> str:
    """Render a resolved value as whitespace-separated text."""
    if isinstance(value, list):
        if value and isinstance(value[0], list):
            return "; ".join(" ".join(str(item) for item in row) for row in value)
        return " ".join(str(item) for item in value)
    return str(value)


def _parse_date(raw_value: str) -> datetime:
    """Parse a CLI reference date."""
    try:
        parsed = datetime.fromisoformat(raw_value.strip())
    except ValueError as error:
        raise argparse.ArgumentTypeError(
            f"invalid date '{raw_value}': expected YYYY-MM-DD or 'YYYY-MM-DD hh:mm:ss'"
        ) from error
    return to_local_naive(parsed)


def _add_files_command(subparsers: Any) -> None:
    """Register files subcommand."""
    parser = subparsers.add_parser("files", help="List database file candidates in search order")
    parser.add_argument("name", help="Database name, e.g. vdc, or an explicit path")


def _add_get_command(subparsers: Any) -> None:
    """Register get subcommand."""
    parser = subparsers.add_parser("get", help="Print the value of one key")
    parser.add_argument("name", help="Database name or explicit path")
    parser.add_argument("key", help="Fully prefixed key, e.g. L.vdc.u1.nw")
    parser.add_argument(
        "--kind",
        default=ValueKind.STRING.value,
        choices=[kind.value for kind in ValueKind if kind is not ValueKind.OBJECT],
        help="Value kind",
    )
    parser.add_argument("--count", type=int, default=0, help="Fixed number of array elements")
    parser.add_argument("--vector", action="store_true", help="Read a variable-length array")
    parser.add_argument(
        "--columns",
        type=int,
        default=0,
        help="Read a matrix with this many columns",
    )
    parser.add_argument("--search", type=int, default=0, help="Namespace search depth")


def _add_resolve_command(subparsers: Any) -> None:
    """Register resolve subcommand."""
    parser = subparsers.add_parser("resolve", help="Resolve a YAML request batch")
    parser.add_argument("name", help="Database name or explicit path")
    parser.add_argument("requests", help="YAML request file")
    parser.add_argument("--prefix", help="Override the request file prefix")
    parser.add_argument("--search", type=int, help="Override the request file search depth")


def _add_seek_command(subparsers: Any) -> None:
    """Register seek subcommand."""
    parser = subparsers.add_parser("seek", help="Check for a [ label=tag ] configuration segment")
    parser.add_argument("name", help="Database name or explicit path")
    parser.add_argument("tag", help="Configuration tag to look for")
    parser.add_argument(
        "--label",
        default=DEFAULT_CONFIG_LABEL,
        help="Marker label (empty for [ tag ])",
    )
    parser.add_argument(
        "--end-on-tag",
        action="store_true",
        help="Stop at the first other section marker",
    )
