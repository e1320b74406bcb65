"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept report models and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from datetime import date, datetime

from fldrs_report.models.report import TotalsReport
from fldrs_report.models.vessel import VesselSummary


def format_totals_table(totals: TotalsReport, as_of: date) -> str:
    """Format the seven totals rows as an ASCII table.

    Example::

        === FLDRS Vessel Totals (as of 2026-10-19) ===
          Vessels  Category
          ---------------------------------------------------------------
              142  all vessels (including inactive)
               97  vessels that have submitted data through FLDRS since 2020-01-01
    """
    width = max((len(r.description) for r in totals.rows), default=20)
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== FLDRS Vessel Totals (as of {as_of.isoformat()}) ===")
    lines.append(f"  {'Vessels':>7}  Category")
    lines.append("  " + "-" * (9 + width))
    for row in totals.rows:
        lines.append(f"  {row.total_vessels:>7}  {row.description}")
    return "\n".join(lines)


def format_vessel_summary(summaries: list[VesselSummary], limit: int = 20) -> str:
    """Format the most recently active vessels, newest first.

    Vessels with no trip in the window are listed after the others.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Most Recent FLDRS Activity ===")

    if not summaries:
        lines.append("  (no vessels in report)")
        return "\n".join(lines)

    header = f"  {'Vessel':<28}  {'Hull':<12}  {'Most recent':<19}  {'Type':<12}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))

    ordered = sorted(
        summaries,
        key=lambda s: (s.most_recent is not None, s.most_recent or datetime.min),
        reverse=True,
    )
    for s in ordered[:limit]:
        when = s.most_recent.strftime("%Y-%m-%d %H:%M:%S") if s.most_recent else "-"
        lines.append(
            f"  {s.vessel_name[:28]:<28}  {s.hull_number[:12]:<12}  {when:<19}  {_trip_type(s):<12}"
        )
    if len(ordered) > limit:
        lines.append(f"  ... and {len(ordered) - limit} more.")
    return "\n".join(lines)


def _trip_type(summary: VesselSummary) -> str:
    labels = [
        ("eVTR", summary.evtr),
        ("sector", summary.sector_trip),
        ("STFLT", summary.study_fleet),
        ("NCRP", summary.ncrp),
        ("ECLAMS", summary.eclams),
        ("EM", summary.em),
    ]
    active = [name for name, flag in labels if flag]
    return "+".join(active) if active else "-"
