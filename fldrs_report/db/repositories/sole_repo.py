"""
Repository for the SOLE (FVTR schema) mirror: enrollments, vessel registry,
program codes and trip submissions.
"""

from __future__ import annotations

import logging
import sqlite3

from fldrs_report.db.repositories.base import BaseRepository
from fldrs_report.models.source import ProgramCode, ProgramEnrollment, VesselRegistryEntry
from fldrs_report.models.trip import TripEvent
from fldrs_report.utils.time_utils import parse_timestamp

logger = logging.getLogger(__name__)


class SoleRepository(BaseRepository):
    """Read access to the four SOLE tables used by the report."""

    source = "sole"

    def get_vessel_programs(self) -> list[ProgramEnrollment]:
        """Return every enrollment line in source order.

        Raises:
            SourceUnavailableError: On query failure or an unparseable
                ``VVP_END_DATE``.
        """
        rows = self.fetchall(
            "VERS_VESSEL_PROGRAMS",
            """
            SELECT FV_AP_NUM, VP_PROGRAM_CODE, VVP_END_DATE
            FROM VERS_VESSEL_PROGRAMS
            ORDER BY rowid;
            """,
        )
        return self.convert_rows("VERS_VESSEL_PROGRAMS", rows, _row_to_enrollment)

    def get_vessels(self) -> list[VesselRegistryEntry]:
        """Return the vessel permit registry ordered by ``AP_NUM``."""
        rows = self.fetchall(
            "FVTR_VESSELS",
            """
            SELECT AP_NUM, VESSEL_NAME, VESSEL_HULL_ID, VESSEL_PERMIT_NUM
            FROM FVTR_VESSELS
            ORDER BY AP_NUM;
            """,
        )
        return self.convert_rows("FVTR_VESSELS", rows, _row_to_vessel)

    def get_programs(self) -> list[ProgramCode]:
        """Return the program code lookup in source order."""
        rows = self.fetchall(
            "VERS_PROGRAMS",
            "SELECT PROGRAM_CODE, PROGRAM_DESCR FROM VERS_PROGRAMS ORDER BY rowid;",
        )
        return self.convert_rows(
            "VERS_PROGRAMS",
            rows,
            lambda r: ProgramCode(program_code=r["PROGRAM_CODE"], description=r["PROGRAM_DESCR"]),
        )

    def get_trips(self) -> list[TripEvent]:
        """Return every trip submission ordered by ``TRIP_ID``.

        The order is what breaks exact timestamp ties downstream, so it must
        be stable between runs.
        """
        rows = self.fetchall(
            "VERS_TRIP_LIST",
            """
            SELECT TRIP_ID, VESSEL_HULL_ID, SAIL_DATE_LCL, UPLOAD_DATE_LCL,
                   EVTR, SECTOR, STFLT, NCRP, ECLAMS, EM
            FROM VERS_TRIP_LIST
            ORDER BY TRIP_ID;
            """,
        )
        return self.convert_rows("VERS_TRIP_LIST", rows, _row_to_trip)


# ── Row converters ────────────────────────────────────────────────────────────


def _row_to_enrollment(row: sqlite3.Row) -> ProgramEnrollment:
    return ProgramEnrollment(
        ap_num=row["FV_AP_NUM"],
        program_code=row["VP_PROGRAM_CODE"],
        end_date=parse_timestamp(row["VVP_END_DATE"]),
    )


def _row_to_vessel(row: sqlite3.Row) -> VesselRegistryEntry:
    return VesselRegistryEntry(
        ap_num=row["AP_NUM"],
        vessel_name=row["VESSEL_NAME"],
        hull_id=row["VESSEL_HULL_ID"],
        permit_number=row["VESSEL_PERMIT_NUM"],
    )


def _row_to_trip(row: sqlite3.Row) -> TripEvent:
    return TripEvent(
        trip_id=row["TRIP_ID"],
        hull_id=row["VESSEL_HULL_ID"],
        sail_date=parse_timestamp(row["SAIL_DATE_LCL"]),
        upload_date=parse_timestamp(row["UPLOAD_DATE_LCL"]),
        evtr=row["EVTR"],
        sector_trip=row["SECTOR"],
        study_fleet=row["STFLT"],
        ncrp=row["NCRP"],
        eclams=row["ECLAMS"],
        em=row["EM"],
    )
