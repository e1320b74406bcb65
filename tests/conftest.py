"""
Shared pytest fixtures for the FLDRS vessel report test suite.

Provides:
  - ``source_dbs``: SOLE and NOVA mirror files under ``tmp_path`` with the
    source schema applied, plus helpers to insert rows.
  - ``record_store``: a ``RecordStore`` over ``source_dbs``.
  - ``app_config`` / ``config_file``: configuration pointed at the temp
    sources, as a model and as a TOML file.
  - Sample domain object factories for use in multiple test modules.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pytest

from fldrs_report.config import (
    AppConfig,
    LoggingConfig,
    ReportConfig,
    SourcesConfig,
)
from fldrs_report.db.connection import get_connection
from fldrs_report.db.record_store import RecordStore
from fldrs_report.db.schema import apply_source_schema
from fldrs_report.models.source import ProgramEnrollment, VesselRegistryEntry
from fldrs_report.models.trip import TripEvent
from fldrs_report.models.vessel import VesselRecord


# ── Source database fixtures ──────────────────────────────────────────────────

_FLAG_COLUMNS = {
    "evtr": "EVTR",
    "sector_trip": "SECTOR",
    "study_fleet": "STFLT",
    "ncrp": "NCRP",
    "eclams": "ECLAMS",
    "em": "EM",
}


class SourceDatabases:
    """Writable handles on the two mirror files used by a test."""

    def __init__(self, sole_path: Path, nova_path: Path) -> None:
        self.sole_path = sole_path
        self.nova_path = nova_path
        for source, path in (("sole", sole_path), ("nova", nova_path)):
            with get_connection(str(path), read_only=False) as conn:
                apply_source_schema(conn, source)

    def _execute(self, path: Path, sql: str, params: tuple[Any, ...]) -> int:
        with get_connection(str(path), read_only=False) as conn:
            return conn.execute(sql, params).lastrowid

    def add_enrollment(
        self,
        ap_num: str,
        program_code: str,
        end_date: Optional[str] = None,
    ) -> None:
        self._execute(
            self.sole_path,
            "INSERT INTO VERS_VESSEL_PROGRAMS (FV_AP_NUM, VP_PROGRAM_CODE, VVP_END_DATE) VALUES (?, ?, ?)",
            (ap_num, program_code, end_date),
        )

    def add_vessel(
        self,
        ap_num: str,
        name: str,
        hull: str,
        permit: Optional[str] = None,
    ) -> None:
        self._execute(
            self.sole_path,
            "INSERT INTO FVTR_VESSELS (AP_NUM, VESSEL_NAME, VESSEL_HULL_ID, VESSEL_PERMIT_NUM) VALUES (?, ?, ?, ?)",
            (ap_num, name, hull, permit),
        )

    def add_program(self, code: str, description: str) -> None:
        self._execute(
            self.sole_path,
            "INSERT INTO VERS_PROGRAMS (PROGRAM_CODE, PROGRAM_DESCR) VALUES (?, ?)",
            (code, description),
        )

    def add_trip(
        self,
        hull: str,
        sail: Optional[str] = None,
        upload: Optional[str] = None,
        **flags: bool,
    ) -> int:
        """Insert a trip; ``flags`` use model names (``evtr=True``, ``em=True``)."""
        columns = ["VESSEL_HULL_ID", "SAIL_DATE_LCL", "UPLOAD_DATE_LCL"]
        values: list[Any] = [hull, sail, upload]
        for name, on in flags.items():
            columns.append(_FLAG_COLUMNS[name])
            values.append(int(on))
        placeholders = ", ".join("?" for _ in columns)
        return self._execute(
            self.sole_path,
            f"INSERT INTO VERS_TRIP_LIST ({', '.join(columns)}) VALUES ({placeholders})",
            tuple(values),
        )

    def add_sector(self, name: str, hull: str, sector_name: Optional[str]) -> None:
        self._execute(
            self.nova_path,
            "INSERT INTO SECTOR_VESSELS_MV (VESNAME, HULLNUM, SECTOR_NAME) VALUES (?, ?, ?)",
            (name, hull, sector_name),
        )


@pytest.fixture
def source_dbs(tmp_path: Path) -> SourceDatabases:
    """Empty SOLE and NOVA mirrors with the source schema applied."""
    return SourceDatabases(
        sole_path=tmp_path / "sources" / "sole.db",
        nova_path=tmp_path / "sources" / "nova.db",
    )


@pytest.fixture
def record_store(source_dbs: SourceDatabases) -> RecordStore:
    """A ``RecordStore`` reading the temp mirrors."""
    return RecordStore(
        sole_db_path=str(source_dbs.sole_path),
        nova_db_path=str(source_dbs.nova_path),
    )


# ── Config fixtures ───────────────────────────────────────────────────────────

@pytest.fixture
def app_config(tmp_path: Path, source_dbs: SourceDatabases) -> AppConfig:
    """``AppConfig`` pointed at the temp mirrors, writing under ``tmp_path``."""
    return AppConfig(
        sources=SourcesConfig(
            sole_db_path=str(source_dbs.sole_path),
            nova_db_path=str(source_dbs.nova_path),
        ),
        report=ReportConfig(output_path=str(tmp_path / "outputs" / "VesselData.xlsx")),
        logging=LoggingConfig(log_file=""),
    )


@pytest.fixture
def config_file(tmp_path: Path, source_dbs: SourceDatabases) -> Path:
    """A TOML config file equivalent to ``app_config``."""
    path = tmp_path / "config" / "test.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "\n".join([
            "[sources]",
            f'sole_db_path = "{source_dbs.sole_path.as_posix()}"',
            f'nova_db_path = "{source_dbs.nova_path.as_posix()}"',
            "",
            "[report]",
            "retention_cutoff = 2020-01-01",
            "trip_window_months = 12",
            f'output_path = "{(tmp_path / "outputs" / "VesselData.xlsx").as_posix()}"',
            "",
            "[logging]",
            'level = "WARNING"',
            'log_file = ""',
            "",
        ]),
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def _clear_fldrs_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FLDRS_* variables from the developer's shell out of every test."""
    for name in (
        "FLDRS_SOLE_DB_PATH",
        "FLDRS_NOVA_DB_PATH",
        "FLDRS_OUTPUT_PATH",
        "FLDRS_LOG_LEVEL",
        "FLDRS_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


# ── Sample domain object factories ────────────────────────────────────────────

@pytest.fixture
def sample_enrollment() -> ProgramEnrollment:
    """An open (no end date) study fleet enrollment."""
    return ProgramEnrollment(ap_num="1001", program_code="STFLT", end_date=None)


@pytest.fixture
def sample_registry_entry() -> VesselRegistryEntry:
    """A valid ``VesselRegistryEntry`` for testing."""
    return VesselRegistryEntry(
        ap_num="1001",
        vessel_name="Sea Star",
        hull_id="ME 1234",
        permit_number="410001",
    )


@pytest.fixture
def sample_trip() -> TripEvent:
    """An eVTR trip uploaded a day after it sailed."""
    return TripEvent(
        trip_id=1,
        hull_id="ME 1234",
        sail_date=datetime(2021, 1, 10, 5, 30),
        upload_date=datetime(2021, 1, 11, 18, 0),
        evtr=True,
    )


@pytest.fixture
def sample_vessel_record() -> VesselRecord:
    """A reconciled vessel in two programs, sector member."""
    return VesselRecord(
        identity="SEASTARME1234",
        vessel_name="Sea Star",
        hull_number="ME 1234",
        permit_number="410001",
        program_codes=("STFLT", "EM"),
        sector_member=True,
        sector_name="Northeast Fishery Sector II",
    )

