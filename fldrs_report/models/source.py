"""
Source record models: rows exactly as read from the SOLE and NOVA mirrors.

One model per source table:

  ``ProgramEnrollment``    ← FVTR.VERS_VESSEL_PROGRAMS  (sole)
  ``VesselRegistryEntry``  ← FVTR.FVTR_VESSELS          (sole)
  ``ProgramCode``          ← FVTR.VERS_PROGRAMS         (sole)
  ``SectorAffiliation``    ← OBDBS.SECTOR_VESSELS_MV    (nova)

Trip submissions live in ``fldrs_report.models.trip``.

All models are frozen. Timestamps are already parsed by the record store;
an unparseable value never reaches these models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ProgramEnrollment(BaseModel):
    """One vessel/program enrollment line.

    Attributes:
        ap_num:       Vessel permit application number (``FV_AP_NUM``).
        program_code: FLDRS program code (``VP_PROGRAM_CODE``).
        end_date:     Enrollment end (``VVP_END_DATE``); ``None`` while active.
    """

    model_config = ConfigDict(frozen=True)

    ap_num: str
    program_code: str
    end_date: Optional[datetime] = None

    @field_validator("ap_num", "program_code", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        # Permit numbers arrive as NUMBER columns from the mirror.
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return v.strip() if isinstance(v, str) else v

    def is_active(self, cutoff: datetime) -> bool:
        """True if the enrollment is open or ended on/after ``cutoff``."""
        return self.end_date is None or self.end_date >= cutoff


class VesselRegistryEntry(BaseModel):
    """One vessel permit record.

    Attributes:
        ap_num:        Permit application number (``AP_NUM``), the join key.
        vessel_name:   Registered vessel name.
        hull_id:       Hull identification number (``VESSEL_HULL_ID``).
        permit_number: Federal permit number (``VESSEL_PERMIT_NUM``).
    """

    model_config = ConfigDict(frozen=True)

    ap_num: str
    vessel_name: str
    hull_id: str
    permit_number: Optional[str] = None

    @field_validator("ap_num", "permit_number", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return v.strip() if isinstance(v, str) else v


class ProgramCode(BaseModel):
    """Program code lookup row (``PROGRAM_CODE`` / ``PROGRAM_DESCR``)."""

    model_config = ConfigDict(frozen=True)

    program_code: str
    description: str


class SectorAffiliation(BaseModel):
    """Groundfish sector membership of one vessel.

    Attributes:
        vessel_name: ``VESNAME``.
        hull_number: ``HULLNUM``.
        sector_name: ``SECTOR_NAME``; may be ``None`` in the source.
    """

    model_config = ConfigDict(frozen=True)

    vessel_name: str
    hull_number: str
    sector_name: Optional[str] = None
