from __future__ import annotations
import re
from ..domain.models import ScanRange
from ..domain.units import INT64_MAX

_DEC_INT = re.compile(r"[+-]?[0-9]+")

def parse_block_param(raw: str) -> int:
    """Base-10 block number in the signed 64-bit range; negatives are rejected."""
    if not _DEC_INT.fullmatch(raw or ""):
        raise ValueError(f"not a base-10 integer: {raw!r}")
    n = int(raw)
    if n < 0 or n > INT64_MAX:
        raise ValueError(f"block number out of range: {raw!r}")
    return n

def clamp_range(start_block: int, end_block: int, latest_block: int) -> ScanRange:
    # only the end is clamped; a start past the head yields an empty walk
    return ScanRange(start=start_block, end=min(end_block, latest_block))
