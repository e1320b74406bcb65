"""
Export helpers for the finished report.

All functions write to disk and return the written ``Path``.

``export_workbook()`` is the main entry point: one worksheet per
``ReportTable``, in table order, header row first. The workbook is saved to
a temporary file next to the destination and moved into place only once it
is complete, so a failed run never leaves a half-written report behind.

``export_tables_csv()`` writes the same tables as one UTF-8 CSV each, for
loading into tools that do not read ``.xlsx``. It stages the files the same
way, so a failure partway through leaves the target directory as it was.
"""

from __future__ import annotations

import csv
import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font

from fldrs_report.models.report import ReportTable, ReportTables

logger = logging.getLogger(__name__)


def _cell_value(value: Any) -> Any:
    """Map a row value to something openpyxl writes natively."""
    if value is None or isinstance(value, (bool, int, float, str, datetime)):
        return value
    return str(value)


def export_workbook(tables: ReportTables, path: Path) -> Path:
    """Write every table to one ``.xlsx`` workbook.

    Args:
        tables: Report tables, in sheet order.
        path:   Destination file path (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    wb.remove(wb.active)
    header_font = Font(bold=True)

    for table in tables.tables:
        ws = wb.create_sheet(title=table.name)
        ws.append(list(table.columns))
        for cell in ws[1]:
            cell.font = header_font
        for row in table.rows:
            ws.append([_cell_value(row.get(col)) for col in table.columns])
        ws.freeze_panes = "A2"

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=path.suffix, dir=path.parent)
    os.close(fd)
    try:
        wb.save(tmp_name)
        os.replace(tmp_name, path)
    except Exception:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Workbook written: %s (%d sheets)", path, len(tables.tables))
    return path


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records and not fieldnames:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_table_csv(table: ReportTable, directory: Path) -> Path:
    """Write one table to ``<directory>/<table.name>.csv``."""
    return export_to_csv(
        [dict(row) for row in table.rows],
        directory / f"{table.name}.csv",
        fieldnames=list(table.columns),
    )


def export_tables_csv(tables: ReportTables, directory: Path) -> list[Path]:
    """Write every table as a CSV file under ``directory``.

    All files are first written to a scratch directory inside ``directory``
    and only moved into place once every table has been written. If writing any
    table fails, no file in ``directory`` is created or replaced.

    Returns:
        Written paths, in table order.

    Raises:
        IsADirectoryError: If a destination file name is taken by a directory.
    """
    directory.mkdir(parents=True, exist_ok=True)
    targets = [directory / f"{table.name}.csv" for table in tables.tables]
    for target in targets:
        if target.is_dir():
            raise IsADirectoryError(f"Cannot write {target}: a directory has that name.")

    scratch = Path(tempfile.mkdtemp(prefix=".csv-", dir=directory))
    try:
        written = [export_table_csv(table, scratch) for table in tables.tables]
        for src, target in zip(written, targets):
            os.replace(src, target)
    finally:
        shutil.rmtree(scratch, ignore_errors=True)

    logger.info("CSV tables written: %s (%d files)", directory, len(targets))
    return targets
