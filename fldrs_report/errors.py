"""
Error taxonomy for a report run.

  DataQualityError        — a vessel identity resolves to more than one
                            distinct value for a single-valued field. Fatal.
  SourceUnavailableError  — a source query failed or returned malformed data.
                            Fatal; no partial report is written.
  EmptyResultWarning      — a totals category matched zero vessels. Not an
                            error; the zero is reported as-is.

Nothing here is retried. Retry policy, if ever needed, belongs to the
record store, not to the reconciliation code.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional


class DataQualityError(RuntimeError):
    """Raised when a vessel identity maps to conflicting values.

    Attributes:
        identity: The offending VesselIdentity.
        field:    Field that should have been single-valued.
        values:   The distinct values found, in first-seen order.
        source:   Table the values came from.
    """

    def __init__(
        self,
        identity: str,
        field: str,
        values: Iterable[Any],
        source: str,
    ) -> None:
        self.identity = identity
        self.field    = field
        self.values   = list(values)
        self.source   = source
        super().__init__(
            f"Vessel '{identity}' has {len(self.values)} distinct values for "
            f"'{field}' in {source}: {self.values!r}"
        )


class SourceUnavailableError(RuntimeError):
    """Raised when a source query fails or yields malformed rows.

    Attributes:
        source: Named source (``"sole"`` or ``"nova"``).
        table:  Table being read.
        detail: What went wrong.
        row:    1-based row number of the malformed row, if applicable.
    """

    def __init__(
        self,
        source: str,
        table: str,
        detail: str,
        row: Optional[int] = None,
    ) -> None:
        self.source = source
        self.table  = table
        self.detail = detail
        self.row    = row
        where = f"{source}.{table}" if row is None else f"{source}.{table} row {row}"
        super().__init__(f"Source {where}: {detail}")


class EmptyResultWarning(UserWarning):
    """A totals category matched no vessels."""
