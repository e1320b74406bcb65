"""
VesselReportStage: pull the sources, build the report, write it out.

Processing steps:
  1. Fetch every record set from the ``RecordStore`` (sole + nova).
  2. Reconcile registry, active enrollments and sectors into vessels.
  3. Summarize each vessel's most recent trip inside the trailing window.
  4. Build the program participation matrix over the active programs.
  5. Compute the seven category totals.
  6. Assemble the six report tables and export them (xlsx or csv).

Steps 2-6 are ``build_report()``, a pure function of the snapshot, so the
same snapshot always produces the same report. Nothing is written until the
whole report has been built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

from fldrs_report.config import AppConfig
from fldrs_report.db.record_store import RecordStore
from fldrs_report.models.meta import RunMetadata
from fldrs_report.models.report import (
    ParticipationMatrix,
    ReportTables,
    SourceSnapshot,
    TotalsReport,
)
from fldrs_report.models.source import ProgramCode
from fldrs_report.models.vessel import VesselSummary
from fldrs_report.pipeline.base import PipelineStage
from fldrs_report.processing.participation import build_participation_matrix
from fldrs_report.processing.reconciler import (
    ReconciliationResult,
    active_program_codes,
    reconcile_vessels,
)
from fldrs_report.processing.totals import compute_totals
from fldrs_report.processing.trip_summary import summarize_trips
from fldrs_report.reporting.export import export_tables_csv, export_workbook
from fldrs_report.reporting.tables import build_report_tables

logger = logging.getLogger(__name__)

VALID_OUTPUT_FORMATS = frozenset({"xlsx", "csv"})


@dataclass
class ReportResult:
    """Everything one report run produced.

    Attributes:
        as_of:          Run date the trip window ends on.
        reconciliation: Vessel records and filtered source rows.
        programs:       Active program lookup rows (matrix columns).
        summaries:      One summary per vessel, report order.
        matrix:         Vessel × program participation.
        totals:         Category counts.
        tables:         Export tables, sheet order.
        output_paths:   Files written (empty until exported).
    """

    as_of:          date
    reconciliation: ReconciliationResult
    programs:       list[ProgramCode]
    summaries:      list[VesselSummary]
    matrix:         ParticipationMatrix
    totals:         TotalsReport
    tables:         ReportTables
    output_paths:   list[Path] = field(default_factory=list)


def build_report(snapshot: SourceSnapshot, config: AppConfig, as_of: date) -> ReportResult:
    """Turn a source snapshot into the full report, without any I/O.

    Raises:
        DataQualityError: If reconciliation finds conflicting vessel values.
    """
    report_cfg = config.report
    reconciliation = reconcile_vessels(
        snapshot.enrollments,
        snapshot.registry,
        snapshot.sectors,
        cutoff=report_cfg.retention_cutoff,
        test_vessel_names=config.vessels.test_vessel_names,
    )
    programs = active_program_codes(reconciliation.vessels, snapshot.program_codes)
    summaries = summarize_trips(
        reconciliation.vessels,
        snapshot.trips,
        as_of=as_of,
        window_months=report_cfg.trip_window_months,
    )
    matrix = build_participation_matrix(programs, summaries, mode=report_cfg.program_match)
    totals = compute_totals(summaries, cutoff=report_cfg.retention_cutoff)
    tables = build_report_tables(as_of, totals, summaries, matrix, reconciliation, programs)

    return ReportResult(
        as_of=as_of,
        reconciliation=reconciliation,
        programs=programs,
        summaries=summaries,
        matrix=matrix,
        totals=totals,
        tables=tables,
    )


class VesselReportStage(PipelineStage):
    """Produce the FLDRS vessel report.

    After ``run()`` succeeds, ``self.result`` holds the ``ReportResult``.
    """

    stage_name = "vessel_report"

    def __init__(
        self,
        config: AppConfig,
        record_store: Optional[RecordStore] = None,
    ) -> None:
        super().__init__(config)
        self.record_store = record_store or RecordStore.from_config(config)
        self.result: Optional[ReportResult] = None

    def _execute(
        self,
        run: RunMetadata,
        as_of: Optional[date] = None,
        output_path: Optional[Path] = None,
        output_format: str = "xlsx",
        write: bool = True,
        **kwargs,
    ) -> int:
        """Build and export the report.

        Args:
            run:           In-progress :class:`RunMetadata`.
            as_of:         Run date; defaults to today (local time, like the
                           trip timestamps).
            output_path:   Workbook path (xlsx) or directory (csv). Defaults to
                           ``config.report.output_path`` (its parent for csv).
            output_format: ``"xlsx"`` or ``"csv"``.
            write:         If ``False`` the report is built but not exported.

        Returns:
            Number of vessels in the report.
        """
        if output_format not in VALID_OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {sorted(VALID_OUTPUT_FORMATS)}, got '{output_format}'."
            )
        as_of = as_of or date.today()

        snapshot = self.record_store.fetch_snapshot()
        result = build_report(snapshot, self.config, as_of)

        if write:
            target = Path(output_path or self.config.report.output_path)
            if output_format == "xlsx":
                result.output_paths = [export_workbook(result.tables, target)]
            else:
                directory = target if target.suffix == "" else target.parent
                result.output_paths = export_tables_csv(result.tables, directory)
            run.output_path = str(result.output_paths[0])

        self.result = result
        return len(result.summaries)
