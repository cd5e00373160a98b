# txscan/ports/sink.py
from __future__ import annotations

from typing import Protocol
from ..domain.models import Block, Transaction


class MatchSink(Protocol):
    """Port receiving every transaction a scan matched, in scan order."""

    async def emit(self, block: Block, tx: Transaction) -> None:
        """Report one matching transaction of `block`."""
