"""
Trip submission model (FVTR.VERS_TRIP_LIST).

A ``TripEvent`` is one trip uploaded through FLDRS. Two timestamps compete
for "most recent": the local sail date and the local upload date. Either may
be missing in the source.

The six trip-type columns are 0/1 integers in the source and are coerced to
``bool`` here; a NULL flag is read as ``False``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

TRIP_FLAG_FIELDS: tuple[str, ...] = (
    "evtr", "sector_trip", "study_fleet", "ncrp", "eclams", "em",
)


class TripEvent(BaseModel):
    """One trip submission.

    Attributes:
        trip_id:     Source row key; defines the stable order of tied events.
        hull_id:     Hull number of the vessel (``VESSEL_HULL_ID``).
        sail_date:   Local sail timestamp (``SAIL_DATE_LCL``).
        upload_date: Local upload timestamp (``UPLOAD_DATE_LCL``).
        evtr:        Trip was reported as an eVTR.
        sector_trip: Trip was made under a groundfish sector (``SECTOR``).
        study_fleet: Study fleet trip (``STFLT``).
        ncrp:        Cooperative research trip.
        eclams:      Clam fishery trip.
        em:          Electronic monitoring trip.
    """

    model_config = ConfigDict(frozen=True)

    trip_id: int
    hull_id: str
    sail_date: Optional[datetime] = None
    upload_date: Optional[datetime] = None
    evtr: bool = False
    sector_trip: bool = False
    study_fleet: bool = False
    ncrp: bool = False
    eclams: bool = False
    em: bool = False

    @field_validator(*TRIP_FLAG_FIELDS, mode="before")
    @classmethod
    def null_flag_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    def flags(self) -> dict[str, bool]:
        """Return the six trip-type flags keyed by field name."""
        return {name: getattr(self, name) for name in TRIP_FLAG_FIELDS}
