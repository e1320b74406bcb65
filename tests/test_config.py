"""Tests for fldrs_report.config."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from fldrs_report.config import AppConfig, ReportConfig, load_config


class TestLoadConfig:
    def test_default_toml_loads(self):
        config = load_config()
        assert config.report.retention_cutoff == date(2020, 1, 1)
        assert config.report.trip_window_months == 12
        assert config.report.program_match == "substring"
        assert "STELLA BLUE" in config.vessels.test_vessel_names

    def test_explicit_file(self, config_file, source_dbs):
        config = load_config(config_file)
        assert config.sources.sole_db_path == source_dbs.sole_path.as_posix()
        assert config.logging.level == "WARNING"
        assert config.logging.log_file == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_local_override_merged(self, config_file):
        (config_file.parent / "local.toml").write_text(
            '[report]\nprogram_match = "token"\n', encoding="utf-8"
        )
        config = load_config(config_file)
        assert config.report.program_match == "token"
        assert config.report.trip_window_months == 12

    def test_env_overrides(self, config_file, monkeypatch, tmp_path):
        monkeypatch.setenv("FLDRS_NOVA_DB_PATH", "/srv/mirror/nova.db")
        monkeypatch.setenv("FLDRS_OUTPUT_PATH", str(tmp_path / "x.xlsx"))
        monkeypatch.setenv("FLDRS_LOG_LEVEL", "debug")
        monkeypatch.setenv("FLDRS_DEBUG", "true")
        config = load_config(config_file)
        assert config.sources.nova_db_path == "/srv/mirror/nova.db"
        assert config.report.output_path == str(tmp_path / "x.xlsx")
        assert config.logging.level == "DEBUG"
        assert config.debug is True

    def test_invalid_value_rejected(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[report]\ntrip_window_months = 0\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)


class TestReportConfig:
    def test_program_match_normalized(self):
        assert ReportConfig(program_match="TOKEN").program_match == "token"

    def test_program_match_invalid(self):
        with pytest.raises(ValidationError):
            ReportConfig(program_match="regex")


def test_app_config_frozen():
    config = AppConfig()
    with pytest.raises(ValidationError):
        config.debug = True
