"""
SQLite connection management for the mirrored source databases.

Provides a context manager ``get_connection()`` that:
  - Opens file databases read-only by default (the report never writes to
    its sources).
  - Sets a busy timeout to handle lock contention from the mirror job.
  - Uses ``sqlite3.Row`` factory so rows behave like dicts.
  - Commits on clean exit, rolls back on exception.

Usage::

    from fldrs_report.db.connection import get_connection

    with get_connection("data/sources/sole.db") as conn:
        rows = conn.execute("SELECT * FROM VERS_PROGRAMS").fetchall()
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

logger = logging.getLogger(__name__)


@contextmanager
def get_connection(
    db_path: str,
    read_only: bool = True,
    busy_timeout_ms: int = 10000,
) -> Generator[sqlite3.Connection, None, None]:
    """Context manager yielding a configured SQLite connection.

    Args:
        db_path: Path to the SQLite database file. Use ``":memory:"`` for
            in-memory databases (useful in tests).
        read_only: Open with ``mode=ro``. A missing file then fails instead
            of being silently created. When ``False`` the file and its parent
            directories are created if needed.
        busy_timeout_ms: Milliseconds to wait when the database is locked
            before raising ``OperationalError``.

    Yields:
        An open, configured ``sqlite3.Connection``.

    Raises:
        sqlite3.OperationalError: If the database cannot be opened or is locked.
    """
    timeout = busy_timeout_ms / 1000
    if db_path == ":memory:":
        conn = sqlite3.connect(db_path, timeout=timeout)
    elif read_only:
        uri = Path(db_path).resolve().as_uri() + "?mode=ro"
        conn = sqlite3.connect(uri, uri=True, timeout=timeout)
    else:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path, timeout=timeout)

    conn.row_factory = sqlite3.Row
    logger.debug("Opened %s (read_only=%s)", db_path, read_only)

    try:
        conn.execute(f"PRAGMA busy_timeout = {busy_timeout_ms};")
        yield conn
        conn.commit()

    except Exception:
        conn.rollback()
        raise

    finally:
        conn.close()
