"""
Program participation matrix: one row per vessel, one column per active
program description.

Two match modes are supported:

  substring  The program code only has to occur somewhere in the vessel's
             comma-joined code string. This is how the report has always
             been produced. A code that is a substring of another code
             (``"EM"`` inside ``"EMX"``) is then reported for both.
  token      The program code must be one of the vessel's codes exactly.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from fldrs_report.models.report import ParticipationMatrix, ParticipationRow
from fldrs_report.models.source import ProgramCode
from fldrs_report.models.vessel import VesselRecord

logger = logging.getLogger(__name__)


def program_matches(code: str, vessel: VesselRecord, mode: str = "substring") -> bool:
    """Return whether ``vessel`` participates in program ``code``.

    Raises:
        ValueError: If ``mode`` is not ``"substring"`` or ``"token"``.
    """
    if mode == "substring":
        return code in vessel.program_codes_display
    if mode == "token":
        return code in vessel.program_code_set
    raise ValueError(f"Unknown program match mode '{mode}'.")


def build_participation_matrix(
    programs: Sequence[ProgramCode],
    vessels: Iterable[VesselRecord],
    mode: str = "substring",
) -> ParticipationMatrix:
    """Build the vessel × program matrix.

    Args:
        programs: Active programs, in column order.
        vessels:  Vessels (records or summaries), in row order.
        mode:     ``"substring"`` or ``"token"``.

    Returns:
        ``ParticipationMatrix`` keyed by VesselIdentity.
    """
    descriptions = tuple(p.description for p in programs)
    if len(set(descriptions)) != len(descriptions):
        # Columns are keyed by description; a later duplicate would overwrite.
        logger.warning("Duplicate program descriptions in lookup: %s", descriptions)

    rows = tuple(
        ParticipationRow(
            identity=v.identity,
            flags={p.description: program_matches(p.program_code, v, mode) for p in programs},
        )
        for v in vessels
    )
    logger.info(
        "Participation matrix: %d vessel(s) × %d program(s) (mode=%s).",
        len(rows), len(descriptions), mode,
    )
    return ParticipationMatrix(descriptions=descriptions, rows=rows)
