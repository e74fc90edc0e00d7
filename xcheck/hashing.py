"""Check identifier derivation.

Identifiers are embedded as literals in the instrumented code, so two
independently built programs only agree if this function never changes.
"""

from __future__ import annotations

DJB2_SEED = 5381
U32_MASK = 0xFFFFFFFF


def djb2(s: str) -> int:
    """djb2 over the UTF-8 bytes of ``s``, wrapping at 32 bits."""
    h = DJB2_SEED
    for c in s.encode("utf-8"):
        h = (h * 33 + c) & U32_MASK
    return h


derive = djb2
