"""
Category totals for the ``Totals`` sheet.

Seven fixed rows, in this order:

  1. every vessel in the report, active or not
  2. vessels whose most recent trip has at least one type flag set
  3. most recent trip was an eVTR
  4. most recent trip was a study fleet trip
  5. most recent trip was cooperative research (NCRP)
  6. most recent trip was a clam trip (ECLAMS)
  7. most recent trip was under electronic monitoring

Rows 3-7 count the most recent trip's flags only. ``None`` flags (no trip in
the window) count as false. A zero count is a valid result and only raises
an ``EmptyResultWarning``.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence
from datetime import date

from fldrs_report.errors import EmptyResultWarning
from fldrs_report.models.report import TotalsReport, TotalsRow
from fldrs_report.models.vessel import VesselSummary

logger = logging.getLogger(__name__)

# (description template, flag field or None for the two composite rows)
TOTALS_CATEGORIES: tuple[tuple[str, str | None], ...] = (
    ("all vessels (including inactive)", None),
    ("vessels that have submitted data through FLDRS since {cutoff}", None),
    ("vessels that have submitted an eVTR through FLDRS since {cutoff}", "evtr"),
    ("vessels participating in study fleet programs", "study_fleet"),
    ("vessels participating in cooperative research (unpaid)", "ncrp"),
    ("clam vessels using FLDRS", "eclams"),
    ("electronic monitoring participants using FLDRS", "em"),
)


def compute_totals(
    summaries: Sequence[VesselSummary],
    cutoff: date = date(2020, 1, 1),
) -> TotalsReport:
    """Count vessels per category.

    Args:
        summaries: Every vessel summary in the report.
        cutoff:    Retention cutoff, rendered into the row descriptions.

    Returns:
        ``TotalsReport`` with exactly seven rows.
    """
    counts = [
        len(summaries),
        sum(1 for s in summaries if s.flag_sum() > 0),
    ]
    counts.extend(
        sum(1 for s in summaries if getattr(s, flag))
        for _, flag in TOTALS_CATEGORIES[2:]
    )

    rows = []
    for (template, _), count in zip(TOTALS_CATEGORIES, counts):
        description = template.format(cutoff=cutoff.isoformat())
        if count == 0:
            warnings.warn(f"No vessels in category: {description}", EmptyResultWarning, stacklevel=2)
        rows.append(TotalsRow(description=description, total_vessels=count))

    logger.info("Totals: %s", ", ".join(str(c) for c in counts))
    return TotalsReport(rows=tuple(rows))
