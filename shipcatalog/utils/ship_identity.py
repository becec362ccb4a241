"""Ship identifier parsing for path parameters."""
from __future__ import annotations

import re

_ID_RE = re.compile(r"[+-]?\d+")


def parse_ship_id(raw: str | int | None) -> int | None:
    """Return the ship id encoded in ``raw``, or None if it is not a valid id.

    Valid ids are base-10 integers >= 1. Whitespace around the digits and
    floats such as "1.0" are rejected.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw >= 1 else None
    text = str(raw)
    if not _ID_RE.fullmatch(text):
        return None
    ship_id = int(text)
    # 64-bit signed upper bound, matching the id column range
    if ship_id < 1 or ship_id > 2**63 - 1:
        return None
    return ship_id
