"""
Report output models.

``TotalsReport``        — the seven fixed category counts.
``ParticipationMatrix`` — vessel × program description booleans.
``SourceSnapshot``      — every record set pulled for one run.
``ReportTables``        — the six named tables handed to the exporter.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict

from fldrs_report.models.source import (
    ProgramCode,
    ProgramEnrollment,
    SectorAffiliation,
    VesselRegistryEntry,
)
from fldrs_report.models.trip import TripEvent


class TotalsRow(BaseModel):
    """One totals category."""

    model_config = ConfigDict(frozen=True)

    description: str
    total_vessels: int


class TotalsReport(BaseModel):
    """Ordered category totals (always seven rows)."""

    model_config = ConfigDict(frozen=True)

    rows: tuple[TotalsRow, ...]

    def counts(self) -> list[int]:
        return [r.total_vessels for r in self.rows]


class ParticipationRow(BaseModel):
    """Program flags for one vessel.

    Attributes:
        identity: VesselIdentity the row is keyed by.
        flags:    Program description → participates.
    """

    model_config = ConfigDict(frozen=True)

    identity: str
    flags: dict[str, bool]


class ParticipationMatrix(BaseModel):
    """One row per vessel, one column per active program description."""

    model_config = ConfigDict(frozen=True)

    descriptions: tuple[str, ...]
    rows: tuple[ParticipationRow, ...]

    def by_identity(self) -> dict[str, ParticipationRow]:
        return {row.identity: row for row in self.rows}


class SourceSnapshot(BaseModel):
    """All source record sets for one report run, fetched up front."""

    model_config = ConfigDict(frozen=True)

    enrollments: tuple[ProgramEnrollment, ...]
    registry: tuple[VesselRegistryEntry, ...]
    sectors: tuple[SectorAffiliation, ...]
    program_codes: tuple[ProgramCode, ...]
    trips: tuple[TripEvent, ...]


# Sheet order of the exported workbook.
REPORT_TABLE_NAMES: tuple[str, ...] = (
    "Totals",
    "VesselData",
    "SectorAffiliations",
    "VesselIdentifiers",
    "ProgramParticipation",
    "ProgramCodes",
)


class ReportTable(BaseModel):
    """A named flat table: explicit column order plus row dicts."""

    model_config = ConfigDict(frozen=True)

    name: str
    columns: tuple[str, ...]
    rows: tuple[dict[str, Any], ...]


class ReportTables(BaseModel):
    """The six export tables, in sheet order."""

    model_config = ConfigDict(frozen=True)

    as_of: date
    tables: tuple[ReportTable, ...]
