"""Tests for the fldrs-report CLI commands."""

from __future__ import annotations

import logging

import pytest
from openpyxl import load_workbook
from typer.testing import CliRunner

from fldrs_report.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logging.captureWarnings(False)
    logging.getLogger().handlers.clear()


def _seed(source_dbs) -> None:
    source_dbs.add_vessel("1001", "Sea Star", "ME 1234", "410001")
    source_dbs.add_enrollment("1001", "STFLT", None)
    source_dbs.add_program("STFLT", "Study Fleet")
    source_dbs.add_trip("ME 1234", sail="2021-01-10 05:30:00", upload="2021-01-11 18:00:00", evtr=True)


def test_validate_config(config_file):
    result = runner.invoke(app, ["validate-config", "--config", str(config_file)])
    assert result.exit_code == 0
    assert "[OK] Config valid." in result.output
    assert "2020-01-01" in result.output


def test_validate_config_missing_file(tmp_path):
    result = runner.invoke(app, ["validate-config", "--config", str(tmp_path / "nope.toml")])
    assert result.exit_code == 1


def test_init_sources(tmp_path):
    cfg = tmp_path / "init.toml"
    cfg.write_text(
        "\n".join([
            "[sources]",
            f'sole_db_path = "{(tmp_path / "new" / "sole.db").as_posix()}"',
            f'nova_db_path = "{(tmp_path / "new" / "nova.db").as_posix()}"',
            "[logging]",
            'log_file = ""',
            "",
        ]),
        encoding="utf-8",
    )
    result = runner.invoke(app, ["init-sources", "--config", str(cfg)])
    assert result.exit_code == 0
    assert (tmp_path / "new" / "sole.db").exists()
    assert (tmp_path / "new" / "nova.db").exists()


def test_run_report_writes_workbook(config_file, source_dbs, tmp_path):
    _seed(source_dbs)
    out = tmp_path / "cli" / "VesselData.xlsx"
    result = runner.invoke(
        app,
        ["run-report", "--config", str(config_file), "--as-of", "2021-02-09", "--output", str(out)],
    )
    assert result.exit_code == 0, result.output
    assert "FLDRS Vessel Totals (as of 2021-02-09)" in result.output
    assert "[OK] Report complete (1 vessels)." in result.output
    assert load_workbook(out).sheetnames[0] == "Totals"


def test_run_report_dry_run(config_file, source_dbs, tmp_path):
    _seed(source_dbs)
    result = runner.invoke(
        app,
        ["run-report", "--config", str(config_file), "--as-of", "2021-02-09", "--dry-run"],
    )
    assert result.exit_code == 0, result.output
    assert "[DRY RUN]" in result.output
    assert not (tmp_path / "outputs").exists()


def test_run_report_bad_as_of(config_file):
    result = runner.invoke(app, ["run-report", "--config", str(config_file), "--as-of", "02/09/2021"])
    assert result.exit_code == 1


def test_run_report_bad_format(config_file):
    result = runner.invoke(app, ["run-report", "--config", str(config_file), "--format", "pdf"])
    assert result.exit_code == 1


def test_run_report_data_quality_error(config_file, source_dbs):
    source_dbs.add_vessel("1001", "Sea Star", "ME 1", "P1")
    source_dbs.add_vessel("1002", "Sea Star", "ME 1", "P2")
    source_dbs.add_enrollment("1001", "STFLT")
    source_dbs.add_enrollment("1002", "STFLT")
    result = runner.invoke(app, ["run-report", "--config", str(config_file), "--as-of", "2021-02-09"])
    assert result.exit_code == 1


def test_run_report_export_failure_reported(config_file, source_dbs, tmp_path):
    _seed(source_dbs)
    out = tmp_path / "blocked" / "VesselData.xlsx"
    out.mkdir(parents=True)
    result = runner.invoke(
        app,
        ["run-report", "--config", str(config_file), "--as-of", "2021-02-09", "--output", str(out)],
    )
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "[ERROR] Report failed:" in result.output
    assert [p.name for p in out.parent.iterdir()] == ["VesselData.xlsx"]
