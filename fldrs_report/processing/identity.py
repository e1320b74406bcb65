"""
Vessel identity keys.

Permit numbers are not a reliable key across the SOLE and NOVA sources, so
vessels are matched on a composite of name and hull number instead.
"""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")


def vessel_identity(vessel_name: str, hull_number: str) -> str:
    """Return the VesselIdentity for a name/hull pair.

    Uppercased concatenation with all whitespace removed::

        >>> vessel_identity("Sea Star", "ME 1234")
        'SEASTARME1234'
    """
    return _WHITESPACE.sub("", f"{vessel_name}{hull_number}".upper())

