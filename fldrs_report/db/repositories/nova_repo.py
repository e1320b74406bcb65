"""
Repository for the NOVA (OBDBS schema) mirror: groundfish sector membership.
"""

from __future__ import annotations

from fldrs_report.db.repositories.base import BaseRepository
from fldrs_report.models.source import SectorAffiliation


class NovaRepository(BaseRepository):
    """Read access to ``SECTOR_VESSELS_MV``."""

    source = "nova"

    def get_sector_vessels(self) -> list[SectorAffiliation]:
        rows = self.fetchall(
            "SECTOR_VESSELS_MV",
            "SELECT VESNAME, HULLNUM, SECTOR_NAME FROM SECTOR_VESSELS_MV ORDER BY rowid;",
        )
        return self.convert_rows(
            "SECTOR_VESSELS_MV",
            rows,
            lambda r: SectorAffiliation(
                vessel_name=r["VESNAME"],
                hull_number=r["HULLNUM"],
                sector_name=r["SECTOR_NAME"],
            ),
        )
