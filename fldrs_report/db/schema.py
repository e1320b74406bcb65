"""
SQLite DDL for the mirrored source tables.

The production sources are two Oracle servers. The report reads SQLite
mirrors of the five tables it needs; table and column names match the
Oracle originals (schema prefix dropped):

  sole  (FVTR schema)
    1. VERS_VESSEL_PROGRAMS   — vessel ↔ program enrollments
    2. FVTR_VESSELS           — vessel permit registry
    3. VERS_PROGRAMS          — program code lookup
    4. VERS_TRIP_LIST         — FLDRS trip submissions
  nova  (OBDBS schema)
    5. SECTOR_VESSELS_MV      — groundfish sector membership

All statements use ``IF NOT EXISTS`` so ``apply_source_schema()`` is
idempotent.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

# ── DDL statements ─────────────────────────────────────────────────────────────

_DDL_VESSEL_PROGRAMS = """
CREATE TABLE IF NOT EXISTS VERS_VESSEL_PROGRAMS (
    VVP_ID          INTEGER PRIMARY KEY AUTOINCREMENT,
    FV_AP_NUM       TEXT    NOT NULL,
    VP_PROGRAM_CODE TEXT    NOT NULL,
    VVP_START_DATE  TEXT,
    VVP_END_DATE    TEXT
);
"""

_DDL_VESSELS = """
CREATE TABLE IF NOT EXISTS FVTR_VESSELS (
    AP_NUM            TEXT PRIMARY KEY,
    VESSEL_NAME       TEXT NOT NULL,
    VESSEL_HULL_ID    TEXT NOT NULL,
    VESSEL_PERMIT_NUM TEXT
);
"""

_DDL_PROGRAMS = """
CREATE TABLE IF NOT EXISTS VERS_PROGRAMS (
    PROGRAM_CODE  TEXT PRIMARY KEY,
    PROGRAM_DESCR TEXT NOT NULL
);
"""

_DDL_TRIP_LIST = """
CREATE TABLE IF NOT EXISTS VERS_TRIP_LIST (
    TRIP_ID         INTEGER PRIMARY KEY AUTOINCREMENT,
    VESSEL_HULL_ID  TEXT    NOT NULL,
    SAIL_DATE_LCL   TEXT,
    UPLOAD_DATE_LCL TEXT,
    EVTR            INTEGER NOT NULL DEFAULT 0,
    SECTOR          INTEGER NOT NULL DEFAULT 0,
    STFLT           INTEGER NOT NULL DEFAULT 0,
    NCRP            INTEGER NOT NULL DEFAULT 0,
    ECLAMS          INTEGER NOT NULL DEFAULT 0,
    EM              INTEGER NOT NULL DEFAULT 0
);
"""

_DDL_IDX_TRIP_HULL = """
CREATE INDEX IF NOT EXISTS idx_trip_list_hull
    ON VERS_TRIP_LIST (VESSEL_HULL_ID);
"""

_DDL_SECTOR_VESSELS = """
CREATE TABLE IF NOT EXISTS SECTOR_VESSELS_MV (
    VESNAME     TEXT NOT NULL,
    HULLNUM     TEXT NOT NULL,
    SECTOR_NAME TEXT
);
"""

SOURCE_DDL: dict[str, list[str]] = {
    "sole": [_DDL_VESSEL_PROGRAMS, _DDL_VESSELS, _DDL_PROGRAMS, _DDL_TRIP_LIST, _DDL_IDX_TRIP_HULL],
    "nova": [_DDL_SECTOR_VESSELS],
}

SOURCE_TABLES: dict[str, list[str]] = {
    "sole": ["VERS_VESSEL_PROGRAMS", "FVTR_VESSELS", "VERS_PROGRAMS", "VERS_TRIP_LIST"],
    "nova": ["SECTOR_VESSELS_MV"],
}


def apply_source_schema(conn: sqlite3.Connection, source: str) -> None:
    """Create the mirrored tables of one named source.

    Args:
        conn: Writable SQLite connection.
        source: ``"sole"`` or ``"nova"``.

    Raises:
        KeyError: If ``source`` is not a known source name.
    """
    statements = SOURCE_DDL[source]
    for ddl in statements:
        conn.execute(ddl)
    conn.commit()
    logger.info("Source schema applied: %s (%d tables)", source, len(SOURCE_TABLES[source]))
