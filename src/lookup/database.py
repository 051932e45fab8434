"""Python SDK for parameter database access.

This module exposes high-level APIs for locating, opening, and
loading request batches from time-versioned database files.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Sequence

from core.config import CaldbConfig
from core.types import DBRequest, RequestBatch
from dbfile.file_resolver import db_file_candidates, open_db_file
from dbfile.segment_seeker import seek_config
from dbfile.stream import DatabaseStream
from lookup.request_resolver import ResolutionContext, resolve_requests
from lookup.value_lookup import TextSubstitution


class ParameterDatabase:
    """Primary SDK entry point for parameter loading."""

    def __init__(
        self,
        config: CaldbConfig | None = None,
        substitute: TextSubstitution | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration. Without one, the
                environment is read again for every lookup.
            substitute: Optional text-variable expansion hook.
        """
        self._config = config
        self._substitute = substitute

    def candidates(self, name: str, date: datetime) -> list[Path]:
        """Return database file candidates for ``name`` in search order."""
        return db_file_candidates(name, date, self._current_config())

    def open(self, name: str, date: datetime) -> DatabaseStream:
        """Open the database file for ``name`` valid at ``date``.

        Raises:
            DatabaseFileNotFoundError: If no candidate can be opened.
        """
        return open_db_file(name, date, self._current_config())

    def load(
        self,
        name: str,
        date: datetime,
        requests: Sequence[DBRequest],
        prefix: str = "",
        search: int = 0,
        here: str = "",
        target: object | None = None,
        config_tag: str | None = None,
    ) -> dict[str, object]:
        """Open a database file and resolve a request batch from it.

        Args:
            name: Database name or explicit file path.
            date: Reference date.
            requests: Requests in resolution order.
            prefix: Namespace prefix of the requests.
            search: Batch-level search depth.
            here: Calling method for diagnostics.
            target: Optional object receiving values as attributes.
            config_tag: Optional ``[ config=tag ]`` segment to start from.

        Returns:
            Resolved values keyed by request destination.

        Raises:
            DatabaseFileNotFoundError: If the file cannot be opened.
            ResolutionError: If any request fails.
        """
        context = ResolutionContext(here=here, prefix=prefix, substitute=self._substitute)
        with self.open(name, date) as stream:
            if config_tag is not None and seek_config(stream, config_tag):
                stream.anchor()
            return resolve_requests(stream, date, requests, prefix, search, context, target)

    def load_batch(
        self,
        name: str,
        date: datetime,
        batch: RequestBatch,
        here: str = "",
        target: object | None = None,
    ) -> dict[str, object]:
        """Resolve a ``RequestBatch`` loaded from a request file."""
        return self.load(
            name,
            date,
            batch.requests,
            prefix=batch.prefix,
            search=batch.search,
            here=here,
            target=target,
        )

    def _current_config(self) -> CaldbConfig:
        return self._config or CaldbConfig.from_env()
