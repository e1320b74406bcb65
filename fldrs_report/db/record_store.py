"""
RecordStore: the single data-access interface of the report.

Two named sources sit behind it:

  sole  — vessel programs, vessel registry, program codes, trip list
  nova  — sector affiliations

Callers never see connection topology: they ask for a record set and get
validated models back. Every record set is read in full, up front; volumes
are in the low thousands of rows.

Failure policy: any error opening a source, running a query, or parsing a
row is raised as ``SourceUnavailableError``. Nothing is retried here.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Generator

from fldrs_report.config import AppConfig
from fldrs_report.db.connection import get_connection
from fldrs_report.db.repositories.nova_repo import NovaRepository
from fldrs_report.db.repositories.sole_repo import SoleRepository
from fldrs_report.errors import SourceUnavailableError
from fldrs_report.models.report import SourceSnapshot
from fldrs_report.models.source import (
    ProgramCode,
    ProgramEnrollment,
    SectorAffiliation,
    VesselRegistryEntry,
)
from fldrs_report.models.trip import TripEvent

logger = logging.getLogger(__name__)


class RecordStore:
    """Read-only access to the SOLE and NOVA mirrors.

    Attributes:
        sources:         Source name → SQLite database path.
        busy_timeout_ms: Lock wait passed to every connection.
    """

    def __init__(
        self,
        sole_db_path: str,
        nova_db_path: str,
        busy_timeout_ms: int = 10000,
    ) -> None:
        self.sources = {"sole": sole_db_path, "nova": nova_db_path}
        self.busy_timeout_ms = busy_timeout_ms

    @classmethod
    def from_config(cls, config: AppConfig) -> "RecordStore":
        return cls(
            sole_db_path=config.sources.sole_db_path,
            nova_db_path=config.sources.nova_db_path,
            busy_timeout_ms=config.sources.busy_timeout_ms,
        )

    @contextmanager
    def _open(self, source: str) -> Generator[sqlite3.Connection, None, None]:
        path = self.sources[source]
        try:
            with get_connection(path, read_only=True, busy_timeout_ms=self.busy_timeout_ms) as conn:
                yield conn
        except sqlite3.Error as exc:
            raise SourceUnavailableError(source, "*", f"cannot open {path}: {exc}") from exc

    # ── Record sets ───────────────────────────────────────────────────────────

    def fetch_vessel_programs(self) -> list[ProgramEnrollment]:
        with self._open("sole") as conn:
            return SoleRepository(conn).get_vessel_programs()

    def fetch_vessel_registry(self) -> list[VesselRegistryEntry]:
        with self._open("sole") as conn:
            return SoleRepository(conn).get_vessels()

    def fetch_program_codes(self) -> list[ProgramCode]:
        with self._open("sole") as conn:
            return SoleRepository(conn).get_programs()

    def fetch_trips(self) -> list[TripEvent]:
        with self._open("sole") as conn:
            return SoleRepository(conn).get_trips()

    def fetch_sector_affiliations(self) -> list[SectorAffiliation]:
        with self._open("nova") as conn:
            return NovaRepository(conn).get_sector_vessels()

    def fetch_snapshot(self) -> SourceSnapshot:
        """Pull every record set the report needs.

        One connection per source, all reads completed before any
        processing starts.

        Raises:
            SourceUnavailableError: If any source or table cannot be read.
        """
        with self._open("sole") as conn:
            sole = SoleRepository(conn)
            enrollments = sole.get_vessel_programs()
            registry = sole.get_vessels()
            program_codes = sole.get_programs()
            trips = sole.get_trips()

        with self._open("nova") as conn:
            sectors = NovaRepository(conn).get_sector_vessels()

        logger.info(
            "Source snapshot: enrollments=%d registry=%d programs=%d trips=%d sectors=%d",
            len(enrollments), len(registry), len(program_codes), len(trips), len(sectors),
        )
        return SourceSnapshot(
            enrollments=tuple(enrollments),
            registry=tuple(registry),
            sectors=tuple(sectors),
            program_codes=tuple(program_codes),
            trips=tuple(trips),
        )
