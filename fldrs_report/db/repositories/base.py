"""
Base repository providing shared SQLite read helpers.

All repositories inherit from ``BaseRepository`` and receive a
``sqlite3.Connection`` at construction time, plus the name of the source it
belongs to. The connection is assumed to be opened and managed by the caller
(typically via ``get_connection()``).

Design:
  - No ORM; all SQL is explicit and lives in repository methods.
  - Repositories speak Pydantic models, not raw dicts.
  - Any ``sqlite3.Error`` or malformed row is raised as
    ``SourceUnavailableError`` naming the source and table.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from fldrs_report.errors import SourceUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository:
    """Shared SQL execution helpers for all repository classes.

    Attributes:
        conn:   The active ``sqlite3.Connection``.
        source: Name of the source the connection points at.
    """

    source: str = ""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def fetchall(
        self,
        table: str,
        sql: str,
        params: tuple[Any, ...] | dict[str, Any] = (),
    ) -> list[sqlite3.Row]:
        """Execute a query against ``table`` and return all rows.

        Raises:
            SourceUnavailableError: If the query fails for any reason.
        """
        logger.debug("SQL [%s]: %s | params: %s", self.source, sql.strip(), params)
        try:
            return self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise SourceUnavailableError(self.source, table, f"query failed: {exc}") from exc

    def convert_rows(
        self,
        table: str,
        rows: list[sqlite3.Row],
        converter: Callable[[sqlite3.Row], T],
    ) -> list[T]:
        """Convert every row with ``converter``, failing on the first bad row.

        ``ValueError`` (bad timestamp) and ``ValidationError`` (missing or
        mistyped column) are both reported as malformed source data.
        """
        result: list[T] = []
        for i, row in enumerate(rows, start=1):
            try:
                result.append(converter(row))
            except (ValueError, ValidationError) as exc:
                raise SourceUnavailableError(
                    self.source, table, f"malformed row: {exc}", row=i
                ) from exc
        return result
