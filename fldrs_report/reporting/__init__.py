"""
fldrs_report.reporting: report assembly, formatting, and export.

Modules:
  tables     — build the six named export tables from the processed data.
  formatters — ASCII terminal formatters for Typer CLI commands.
  export     — ``.xlsx`` workbook and per-table CSV writers.
"""
