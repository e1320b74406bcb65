"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``FLDRS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

All pipeline stages and CLI commands receive an ``AppConfig`` instance,
never raw dicts or individual env var lookups scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from datetime import date
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class SourcesConfig(BaseModel):
    """Locations of the two mirrored relational sources.

    ``sole`` holds vessel programs, the vessel registry, program codes and the
    trip list. ``nova`` holds sector affiliations.
    """

    model_config = ConfigDict(frozen=True)

    sole_db_path: str = "data/sources/sole.db"
    nova_db_path: str = "data/sources/nova.db"
    busy_timeout_ms: int = 10000


VALID_PROGRAM_MATCH_MODES = frozenset({"substring", "token"})


class ReportConfig(BaseModel):
    """Report generation parameters.

    Attributes:
        retention_cutoff:   Enrollments that ended before this date are dropped.
        trip_window_months: Trailing window of trip submissions considered.
        program_match:      ``"substring"`` reproduces the legacy containment
                            test; ``"token"`` matches whole program codes only.
        output_path:        Destination of the spreadsheet.
    """

    model_config = ConfigDict(frozen=True)

    retention_cutoff: date = date(2020, 1, 1)
    trip_window_months: int = 12
    program_match: str = "substring"
    output_path: str = "data/outputs/VesselData.xlsx"

    @field_validator("trip_window_months")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"trip_window_months must be >= 1, got {v}.")
        return v

    @field_validator("program_match")
    @classmethod
    def validate_program_match(cls, v: str) -> str:
        v = v.lower()
        if v not in VALID_PROGRAM_MATCH_MODES:
            raise ValueError(
                f"program_match must be one of {sorted(VALID_PROGRAM_MATCH_MODES)}, got '{v}'."
            )
        return v


class VesselsConfig(BaseModel):
    """Vessel-level filters."""

    model_config = ConfigDict(frozen=True)

    # Exact, case-sensitive vessel names of known test vessels.
    test_vessel_names: list[str] = [
        "TENNESSEE JED", "STELLA BLUE", "CHINA CAT SUNFLOWER",
    ]


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/fldrs_report.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth.

    It is constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    sources: SourcesConfig = SourcesConfig()
    report: ReportConfig = ReportConfig()
    vessels: VesselsConfig = VesselsConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply FLDRS_* environment variable overrides
    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply FLDRS_* env vars to the raw config dict.

    Supported overrides:
      FLDRS_SOLE_DB_PATH  → raw["sources"]["sole_db_path"]
      FLDRS_NOVA_DB_PATH  → raw["sources"]["nova_db_path"]
      FLDRS_OUTPUT_PATH   → raw["report"]["output_path"]
      FLDRS_LOG_LEVEL     → raw["logging"]["level"]
      FLDRS_DEBUG         → raw["debug"]
    """
    if sole := os.environ.get("FLDRS_SOLE_DB_PATH"):
        raw.setdefault("sources", {})["sole_db_path"] = sole

    if nova := os.environ.get("FLDRS_NOVA_DB_PATH"):
        raw.setdefault("sources", {})["nova_db_path"] = nova

    if output := os.environ.get("FLDRS_OUTPUT_PATH"):
        raw.setdefault("report", {})["output_path"] = output

    if log_level := os.environ.get("FLDRS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("FLDRS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        sources=SourcesConfig(**raw.get("sources", {})),
        report=ReportConfig(**raw.get("report", {})),
        vessels=VesselsConfig(**raw.get("vessels", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
