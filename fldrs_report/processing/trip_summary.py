"""
Most-recent-trip summarization.

For each vessel, every trip submission for its hull inside the trailing
window is scanned and a single "most recent" trip is chosen. The summary
carries that trip's timestamps and type flags.

Selecting the most recent trip
------------------------------
Sail and upload timestamps are pooled and the maximum taken. Then:

  - If the maximum is one of the upload timestamps, the candidates are the
    trips whose upload timestamp equals the maximum upload.
  - Otherwise the candidates are the trips whose sail timestamp equals the
    maximum sail.

So when one trip sailed at T and another was uploaded at T, the uploaded
trip wins. If several candidates remain, the one with the lowest
``trip_id`` is used, so the choice does not depend on row order.

Flags are copied from the chosen trip only: they describe the most recent
trip, not whether the vessel has ever made a trip of that type.

``most_recent_evtr`` is computed independently: the latest upload timestamp
among the vessel's eVTR trips.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Optional

from fldrs_report.models.trip import TripEvent
from fldrs_report.models.vessel import VesselRecord, VesselSummary
from fldrs_report.utils.time_utils import months_before, start_of_day

logger = logging.getLogger(__name__)


def window_start(as_of: date, window_months: int = 12) -> datetime:
    """Return the start of the trailing trip window as a timestamp."""
    return start_of_day(months_before(as_of, window_months))


def filter_trip_window(
    trips: Iterable[TripEvent],
    as_of: date,
    window_months: int = 12,
) -> list[TripEvent]:
    """Keep trips that sailed or were uploaded on/after the window start.

    A missing timestamp never satisfies the comparison.
    """
    start = window_start(as_of, window_months)
    return [
        t for t in trips
        if (t.sail_date is not None and t.sail_date >= start)
        or (t.upload_date is not None and t.upload_date >= start)
    ]


def select_most_recent(trips: Sequence[TripEvent]) -> Optional[TripEvent]:
    """Pick the most recent trip with the upload-preferring tie-break.

    Returns ``None`` if ``trips`` is empty or no trip has any timestamp.
    """
    uploads = [t.upload_date for t in trips if t.upload_date is not None]
    sails = [t.sail_date for t in trips if t.sail_date is not None]
    if not uploads and not sails:
        return None

    latest = max(uploads + sails)
    if latest in uploads:
        max_upload = max(uploads)
        candidates = [t for t in trips if t.upload_date == max_upload]
    else:
        max_sail = max(sails)
        candidates = [t for t in trips if t.sail_date == max_sail]

    chosen = min(candidates, key=lambda t: t.trip_id)
    if len(candidates) > 1:
        logger.debug(
            "Hull %s: %d trips tie at %s; using lowest trip_id=%d.",
            chosen.hull_id, len(candidates), latest, chosen.trip_id,
        )
    return chosen


def latest_evtr_upload(trips: Iterable[TripEvent]) -> Optional[datetime]:
    """Latest upload timestamp among eVTR trips, or ``None``."""
    uploads = [t.upload_date for t in trips if t.evtr and t.upload_date is not None]
    return max(uploads) if uploads else None


def summarize_vessel(vessel: VesselRecord, trips: Sequence[TripEvent]) -> VesselSummary:
    """Build the ``VesselSummary`` for one vessel from its own trips."""
    base = vessel.model_dump()
    selected = select_most_recent(trips)
    if selected is None:
        return VesselSummary(**base)

    timestamps = [
        ts for t in trips for ts in (t.sail_date, t.upload_date) if ts is not None
    ]
    return VesselSummary(
        **base,
        most_recent=max(timestamps),
        most_recent_evtr=latest_evtr_upload(trips),
        **selected.flags(),
    )


def summarize_trips(
    vessels: Iterable[VesselRecord],
    trips: Iterable[TripEvent],
    as_of: date,
    window_months: int = 12,
) -> list[VesselSummary]:
    """Summarize the most recent trip of every vessel.

    Args:
        vessels:       Reconciled vessels, in report order.
        trips:         All trip submissions, in source order.
        as_of:         Run date; the window ends here.
        window_months: Length of the trailing window in calendar months.

    Returns:
        One ``VesselSummary`` per vessel, same order as ``vessels``.
    """
    in_window = filter_trip_window(trips, as_of, window_months)

    by_hull: dict[str, list[TripEvent]] = {}
    for trip in in_window:
        by_hull.setdefault(trip.hull_id, []).append(trip)

    summaries = [summarize_vessel(v, by_hull.get(v.hull_number, [])) for v in vessels]

    logger.info(
        "Summarized %d vessel(s): %d trip(s) in window since %s, %d vessel(s) with a recent trip.",
        len(summaries), len(in_window), window_start(as_of, window_months).date().isoformat(),
        sum(1 for s in summaries if s.has_recent_trip),
    )
    return summaries
