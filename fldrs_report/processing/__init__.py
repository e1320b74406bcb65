"""
fldrs_report.processing: the reconciliation and summarization core.

Pure functions over the models in ``fldrs_report.models``; no I/O.

Modules:
  identity      — VesselIdentity normalization.
  reconciler    — registry × active enrollments × sector membership.
  trip_summary  — most recent trip per vessel, trailing window.
  participation — vessel × program boolean matrix.
  totals        — the seven category counts.
"""
