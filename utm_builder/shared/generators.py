"""
Identifier generators: pure, side-effect-free functions.
"""

from __future__ import annotations

import secrets
from typing import Optional

STAMP_HEX_LENGTH = 16


def generate_build_id(stamp_ns: int) -> str:
    """Generate a history build id that sorts in creation order.

    The id is the nanosecond stamp as fixed-width hex followed by 8 random hex
    characters, so lexical order follows *stamp_ns* and two ids never clash
    even when stamps do.

    Args:
        stamp_ns: Strictly increasing creation stamp (nanoseconds).
    """
    return f"{stamp_ns:0{STAMP_HEX_LENGTH}x}{secrets.token_hex(4)}"


def build_id_stamp(build_id: str) -> Optional[int]:
    """Return the creation stamp encoded in *build_id*, or None for foreign ids."""
    try:
        return int(build_id[:STAMP_HEX_LENGTH], 16)
    except ValueError:
        return None
