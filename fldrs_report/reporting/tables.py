"""
Assemble the six named report tables handed to the exporter.

Sheet order and contents:

  Totals                — seven category counts (``desc``, ``totalVessels``)
  VesselData            — vessel summary + participation matrix columns;
                          the comma-joined program codes and the VID join
                          key are not exported
  SectorAffiliations    — sector rows for vessels in the report, with ``ID``
  VesselIdentifiers     — registry entries with an active enrollment
  ProgramParticipation  — active enrollment lines
  ProgramCodes          — program lookup rows used by at least one vessel

Column names follow the source and legacy sheet headers so downstream
spreadsheets keep working.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any

from fldrs_report.models.report import (
    ParticipationMatrix,
    ReportTable,
    ReportTables,
    TotalsReport,
)
from fldrs_report.models.source import ProgramCode
from fldrs_report.models.vessel import VesselSummary
from fldrs_report.processing.identity import vessel_identity
from fldrs_report.processing.reconciler import ReconciliationResult

# VesselData column → VesselSummary attribute
VESSEL_DATA_COLUMNS: tuple[tuple[str, str], ...] = (
    ("VesselName",   "vessel_name"),
    ("HullNumber",   "hull_number"),
    ("PermitNumber", "permit_number"),
    ("SectorMember", "sector_member"),
    ("Sector",       "sector_name"),
    ("MostRecent",   "most_recent"),
    ("MR_EVTR",      "most_recent_evtr"),
    ("EVTR",         "evtr"),
    ("SECTORTRIP",   "sector_trip"),
    ("STFLT",        "study_fleet"),
    ("NCRP",         "ncrp"),
    ("ECLAMS",       "eclams"),
    ("EM",           "em"),
)


def totals_table(totals: TotalsReport) -> ReportTable:
    return ReportTable(
        name="Totals",
        columns=("desc", "totalVessels"),
        rows=tuple({"desc": r.description, "totalVessels": r.total_vessels} for r in totals.rows),
    )


def vessel_data_table(
    summaries: Sequence[VesselSummary],
    matrix: ParticipationMatrix,
) -> ReportTable:
    """Join vessel summaries to their participation row on VesselIdentity.

    Raises:
        KeyError:   If a summary has no participation row.
        ValueError: If a program description repeats a fixed column name.
    """
    fixed = tuple(col for col, _ in VESSEL_DATA_COLUMNS)
    clashes = [d for d in matrix.descriptions if d in fixed]
    if clashes:
        raise ValueError(
            f"Program description(s) {clashes} collide with VesselData columns; "
            "rename them in the program lookup."
        )

    by_identity = matrix.by_identity()
    columns = fixed + matrix.descriptions

    rows: list[dict[str, Any]] = []
    for summary in summaries:
        row = {col: getattr(summary, attr) for col, attr in VESSEL_DATA_COLUMNS}
        row.update(by_identity[summary.identity].flags)
        rows.append(row)

    return ReportTable(name="VesselData", columns=columns, rows=tuple(rows))


def build_report_tables(
    as_of: date,
    totals: TotalsReport,
    summaries: Sequence[VesselSummary],
    matrix: ParticipationMatrix,
    reconciliation: ReconciliationResult,
    programs: Sequence[ProgramCode],
) -> ReportTables:
    """Build every export table, in sheet order."""
    sectors = ReportTable(
        name="SectorAffiliations",
        columns=("VESNAME", "HULLNUM", "SECTOR_NAME", "ID"),
        rows=tuple(
            {
                "VESNAME": s.vessel_name,
                "HULLNUM": s.hull_number,
                "SECTOR_NAME": s.sector_name,
                "ID": vessel_identity(s.vessel_name, s.hull_number),
            }
            for s in reconciliation.sectors
        ),
    )
    identifiers = ReportTable(
        name="VesselIdentifiers",
        columns=("AP_NUM", "VESSEL_NAME", "VESSEL_HULL_ID", "VESSEL_PERMIT_NUM"),
        rows=tuple(
            {
                "AP_NUM": v.ap_num,
                "VESSEL_NAME": v.vessel_name,
                "VESSEL_HULL_ID": v.hull_id,
                "VESSEL_PERMIT_NUM": v.permit_number,
            }
            for v in reconciliation.registry
        ),
    )
    participation = ReportTable(
        name="ProgramParticipation",
        columns=("FV_AP_NUM", "VP_PROGRAM_CODE", "VVP_END_DATE"),
        rows=tuple(
            {
                "FV_AP_NUM": e.ap_num,
                "VP_PROGRAM_CODE": e.program_code,
                "VVP_END_DATE": e.end_date,
            }
            for e in reconciliation.enrollments
        ),
    )
    codes = ReportTable(
        name="ProgramCodes",
        columns=("PROGRAM_CODE", "PROGRAM_DESCR"),
        rows=tuple({"PROGRAM_CODE": p.program_code, "PROGRAM_DESCR": p.description} for p in programs),
    )

    return ReportTables(
        as_of=as_of,
        tables=(
            totals_table(totals),
            vessel_data_table(summaries, matrix),
            sectors,
            identifiers,
            participation,
            codes,
        ),
    )
