"""
FLDRS vessel report: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (schema init, report run).
  5. Report result to stdout.

Install and run::

    pip install -e .
    fldrs-report --help
    fldrs-report validate-config
    fldrs-report init-sources
    fldrs-report run-report
    fldrs-report run-report --as-of 2021-02-09 --output data/outputs/VesselData.xlsx
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="fldrs-report",
    help="FLDRS vessel participation report: SOLE/NOVA reconciliation to spreadsheet.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from fldrs_report.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from fldrs_report.utils.logging import configure_logging
    configure_logging(config.logging)


def _parse_as_of(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        typer.echo(f"[ERROR] --as-of must be YYYY-MM-DD, got '{value}'.", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  SOLE source:       {config.sources.sole_db_path}")
    typer.echo(f"  NOVA source:       {config.sources.nova_db_path}")
    typer.echo(f"  Retention cutoff:  {config.report.retention_cutoff.isoformat()}")
    typer.echo(f"  Trip window:       {config.report.trip_window_months} months")
    typer.echo(f"  Program match:     {config.report.program_match}")
    typer.echo(f"  Output path:       {config.report.output_path}")
    typer.echo(f"  Test vessels:      {', '.join(config.vessels.test_vessel_names) or '(none)'}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("init-sources")
def init_sources(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Create empty SOLE and NOVA mirror databases with the source tables.

    Safe to run multiple times; all DDL uses IF NOT EXISTS. Intended for
    local development and for the job that refreshes the mirrors.
    """
    from fldrs_report.db.connection import get_connection
    from fldrs_report.db.schema import SOURCE_TABLES, apply_source_schema

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    targets = {
        "sole": config.sources.sole_db_path,
        "nova": config.sources.nova_db_path,
    }
    for source, db_path in targets.items():
        typer.echo(f"Initializing {source} mirror at: {db_path}")
        with get_connection(
            db_path,
            read_only=False,
            busy_timeout_ms=config.sources.busy_timeout_ms,
        ) as conn:
            apply_source_schema(conn, source)
        typer.echo(f"  Tables: {', '.join(SOURCE_TABLES[source])}")

    typer.echo("[OK] Source mirrors ready.")


@app.command("run-report")
def run_report(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Workbook path (xlsx) or output directory (csv). Defaults to config.report.output_path.",
    ),
    as_of: Optional[str] = typer.Option(
        None,
        "--as-of",
        help="Run date (YYYY-MM-DD) the 12-month trip window ends on. Defaults to today.",
    ),
    output_format: str = typer.Option(
        "xlsx",
        "--format",
        help="Output format: xlsx (one workbook) or csv (one file per sheet).",
    ),
    show_vessels: int = typer.Option(
        0,
        "--show-vessels",
        help="Also print the N most recently active vessels.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Build the report and print totals without writing any file.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Build the FLDRS vessel report and export it.

    \b
    Steps:
      1. Read vessel programs, registry, program codes and trips (SOLE)
         and sector affiliations (NOVA).
      2. Reconcile vessels, summarize the most recent trip of each,
         build the program matrix and the category totals.
      3. Write Totals, VesselData, SectorAffiliations, VesselIdentifiers,
         ProgramParticipation and ProgramCodes.

    Any error aborts the run with exit code 1; no partial report is written.
    """
    from fldrs_report.errors import DataQualityError, SourceUnavailableError
    from fldrs_report.pipeline.report import VALID_OUTPUT_FORMATS, VesselReportStage
    from fldrs_report.reporting.formatters import format_totals_table, format_vessel_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    run_date = _parse_as_of(as_of)
    fmt = output_format.lower()
    if fmt not in VALID_OUTPUT_FORMATS:
        typer.echo(
            f"[ERROR] Unsupported format '{output_format}'. Use one of {sorted(VALID_OUTPUT_FORMATS)}.",
            err=True,
        )
        raise typer.Exit(code=1)

    typer.echo(
        f"run-report | sole={config.sources.sole_db_path} | nova={config.sources.nova_db_path}"
    )

    stage = VesselReportStage(config=config)
    try:
        run = stage.run(
            as_of=run_date,
            output_path=Path(output) if output else None,
            output_format=fmt,
            write=not dry_run,
        )
    except DataQualityError as exc:
        typer.echo(f"[ERROR] Data quality: {exc}", err=True)
        raise typer.Exit(code=1)
    except SourceUnavailableError as exc:
        typer.echo(f"[ERROR] Source unavailable: {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Report failed: {exc}", err=True)
        raise typer.Exit(code=1)

    result = stage.result
    assert result is not None

    typer.echo(format_totals_table(result.totals, result.as_of))
    if show_vessels > 0:
        typer.echo(format_vessel_summary(result.summaries, limit=show_vessels))

    typer.echo("")
    if dry_run:
        typer.echo(f"[DRY RUN] {run.rows_processed} vessel(s); no file written.")
        return

    for path in result.output_paths:
        typer.echo(f"  Written: {path}")
    typer.echo(f"[OK] Report complete ({run.rows_processed} vessels).")


if __name__ == "__main__":
    app()
