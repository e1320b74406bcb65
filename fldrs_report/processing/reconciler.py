"""
Vessel reconciliation: registry × active enrollments × sector membership.

Processing steps:
  1. Keep enrollments that are open or ended on/after the retention cutoff.
  2. Keep registry entries whose ``ap_num`` has at least one kept enrollment.
  3. Join registry to enrollments on ``ap_num``, one joined row per program.
  4. Restrict sector rows to hull numbers present in the join and key both
     sides by VesselIdentity.
  5. Drop joined rows for known test vessels (exact name match).
  6. Group by identity in first-seen order and build one ``VesselRecord``
     per group. Name, hull, permit and sector name must each be
     single-valued per identity; anything else is a ``DataQualityError``.

The join preserves registry order (``AP_NUM``), then enrollment order within
each permit, so vessel order is stable for a given source snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from fldrs_report.errors import DataQualityError
from fldrs_report.models.source import (
    ProgramCode,
    ProgramEnrollment,
    SectorAffiliation,
    VesselRegistryEntry,
)
from fldrs_report.models.vessel import VesselRecord
from fldrs_report.processing.identity import vessel_identity
from fldrs_report.utils.time_utils import start_of_day

logger = logging.getLogger(__name__)


# ── Result types ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class JoinedEnrollment:
    """One registry entry joined to one of its active enrollments."""

    identity:   str
    vessel:     VesselRegistryEntry
    enrollment: ProgramEnrollment


@dataclass(frozen=True)
class ReconciliationResult:
    """Output of ``reconcile_vessels``.

    Attributes:
        vessels:     One ``VesselRecord`` per identity, first-seen order.
        enrollments: Active enrollments (retention filter applied).
        registry:    Registry entries with at least one active enrollment.
        sectors:     Sector rows whose hull appears in the joined data.
    """

    vessels:     list[VesselRecord]
    enrollments: list[ProgramEnrollment] = field(default_factory=list)
    registry:    list[VesselRegistryEntry] = field(default_factory=list)
    sectors:     list[SectorAffiliation] = field(default_factory=list)


# ── Public functions ──────────────────────────────────────────────────────────


def filter_active_enrollments(
    enrollments: Iterable[ProgramEnrollment],
    cutoff: date,
) -> list[ProgramEnrollment]:
    """Return enrollments with no end date or an end date on/after ``cutoff``."""
    cutoff_ts = start_of_day(cutoff)
    return [e for e in enrollments if e.is_active(cutoff_ts)]


def reconcile_vessels(
    enrollments: Iterable[ProgramEnrollment],
    registry: Iterable[VesselRegistryEntry],
    sectors: Iterable[SectorAffiliation],
    cutoff: date,
    test_vessel_names: Collection[str] = (),
) -> ReconciliationResult:
    """Build the vessel list of the report.

    Args:
        enrollments:       All enrollment lines (end dates already parsed).
        registry:          All vessel registry entries.
        sectors:           All sector affiliation rows.
        cutoff:            Retention cutoff for enrollment end dates.
        test_vessel_names: Vessel names to exclude (exact, case-sensitive).

    Returns:
        ``ReconciliationResult`` with vessel records and the filtered inputs.

    Raises:
        DataQualityError: If an identity resolves to more than one vessel
            name, hull number, permit number, or sector name.
    """
    enrollments = list(enrollments)
    active = filter_active_enrollments(enrollments, cutoff)

    by_ap_num: dict[str, list[ProgramEnrollment]] = {}
    for enrollment in active:
        by_ap_num.setdefault(enrollment.ap_num, []).append(enrollment)

    kept_registry = [v for v in registry if v.ap_num in by_ap_num]

    joined = [
        JoinedEnrollment(
            identity=vessel_identity(vessel.vessel_name, vessel.hull_id),
            vessel=vessel,
            enrollment=enrollment,
        )
        for vessel in kept_registry
        for enrollment in by_ap_num[vessel.ap_num]
    ]

    joined_hulls = {j.vessel.hull_id for j in joined}
    kept_sectors = [s for s in sectors if s.hull_number in joined_hulls]
    sectors_by_identity: dict[str, list[SectorAffiliation]] = {}
    for sector in kept_sectors:
        key = vessel_identity(sector.vessel_name, sector.hull_number)
        sectors_by_identity.setdefault(key, []).append(sector)

    denylist = set(test_vessel_names)
    before = len(joined)
    joined = [j for j in joined if j.vessel.vessel_name not in denylist]
    if before != len(joined):
        logger.info("Excluded %d enrollment row(s) for test vessels.", before - len(joined))

    groups: dict[str, list[JoinedEnrollment]] = {}
    for row in joined:
        groups.setdefault(row.identity, []).append(row)

    vessels = [
        _build_vessel_record(identity, rows, sectors_by_identity.get(identity, []))
        for identity, rows in groups.items()
    ]

    logger.info(
        "Reconciled %d vessel(s) from %d active enrollment(s) (%d dropped by cutoff %s).",
        len(vessels), len(active), len(enrollments) - len(active), cutoff.isoformat(),
    )
    return ReconciliationResult(
        vessels=vessels,
        enrollments=active,
        registry=kept_registry,
        sectors=kept_sectors,
    )


def active_program_codes(
    vessels: Iterable[VesselRecord],
    program_codes: Iterable[ProgramCode],
) -> list[ProgramCode]:
    """Return the program lookup rows used by at least one vessel, in lookup order."""
    used: set[str] = set()
    for vessel in vessels:
        used.update(vessel.program_codes)
    return [p for p in program_codes if p.program_code in used]


# ── Helpers ───────────────────────────────────────────────────────────────────


def _single_value(
    identity: str,
    field_name: str,
    values: Iterable[Any],
    source: str,
) -> Any:
    """Return the one distinct value in ``values`` or raise ``DataQualityError``.

    ``None`` counts as a value of its own.
    """
    distinct = list(dict.fromkeys(values))
    if len(distinct) != 1:
        raise DataQualityError(identity, field_name, distinct, source)
    return distinct[0]


def _build_vessel_record(
    identity: str,
    rows: list[JoinedEnrollment],
    sector_rows: list[SectorAffiliation],
) -> VesselRecord:
    sector_name: Optional[str] = None
    if sector_rows:
        sector_name = _single_value(
            identity, "sector_name", (s.sector_name for s in sector_rows), "SECTOR_VESSELS_MV"
        )

    return VesselRecord(
        identity=identity,
        vessel_name=_single_value(identity, "vessel_name", (r.vessel.vessel_name for r in rows), "FVTR_VESSELS"),
        hull_number=_single_value(identity, "hull_number", (r.vessel.hull_id for r in rows), "FVTR_VESSELS"),
        permit_number=_single_value(identity, "permit_number", (r.vessel.permit_number for r in rows), "FVTR_VESSELS"),
        program_codes=tuple(r.enrollment.program_code for r in rows),
        sector_member=bool(sector_rows),
        sector_name=sector_name,
    )
