"""
Reconciled vessel models.

``VesselRecord``  — one per VesselIdentity, built by the reconciler from the
                    registry, active enrollments and sector affiliations.
``VesselSummary`` — a ``VesselRecord`` extended with the most recent trip
                    submission and that trip's type flags.

Program codes are kept as an ordered list (duplicates allowed, since
membership is only ever tested, never counted) and rendered comma-joined for
display.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from fldrs_report.models.trip import TRIP_FLAG_FIELDS


class VesselRecord(BaseModel):
    """A unique vessel enrolled in at least one active FLDRS program.

    Attributes:
        identity:      Normalized name+hull key (see ``vessel_identity``).
        vessel_name:   Registered vessel name.
        hull_number:   Hull identification number.
        permit_number: Federal permit number.
        program_codes: Program codes from every active enrollment, in order.
        sector_member: Whether the vessel appears in the sector list.
        sector_name:   Sector the vessel belongs to, if any.
    """

    model_config = ConfigDict(frozen=True)

    identity: str
    vessel_name: str
    hull_number: str
    permit_number: Optional[str] = None
    program_codes: tuple[str, ...] = ()
    sector_member: bool = False
    sector_name: Optional[str] = None

    @property
    def program_codes_display(self) -> str:
        return ",".join(self.program_codes)

    @property
    def program_code_set(self) -> frozenset[str]:
        return frozenset(self.program_codes)


class VesselSummary(VesselRecord):
    """A vessel plus its most recent FLDRS trip submission.

    Every trip field is ``None`` when the vessel has no trip inside the
    reporting window.

    Attributes:
        most_recent:      Latest sail or upload timestamp across all trips.
        most_recent_evtr: Latest upload timestamp among eVTR trips.
        evtr, sector_trip, study_fleet, ncrp, eclams, em:
                          Type flags of the single most recent trip.
    """

    most_recent: Optional[datetime] = None
    most_recent_evtr: Optional[datetime] = None
    evtr: Optional[bool] = None
    sector_trip: Optional[bool] = None
    study_fleet: Optional[bool] = None
    ncrp: Optional[bool] = None
    eclams: Optional[bool] = None
    em: Optional[bool] = None

    @property
    def has_recent_trip(self) -> bool:
        return self.most_recent is not None

    def flag_sum(self) -> int:
        """Number of true trip-type flags; ``None`` counts as 0."""
        return sum(1 for name in TRIP_FLAG_FIELDS if getattr(self, name))
