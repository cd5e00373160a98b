# txscan/ports/rpc.py
from __future__ import annotations

from typing import Any, Protocol, Sequence
from ..domain.models import Block


class RPCClient(Protocol):
    """Port for a JSON-RPC 2.0 transport bound to one node endpoint."""

    async def call(self, method: str, params: Sequence[Any] = ()) -> Any:
        """Invoke `method` and return the envelope's `result` (None when absent)."""

    async def aclose(self) -> None:
        """Release any pooled connections."""


class ChainReader(Protocol):
    """Port for the two chain queries a scan needs."""

    async def get_latest_block_number(self) -> int:
        """Return the chain head as an integer."""

    async def get_block_by_number(self, block_hex: str) -> Block:
        """Return the block with full transaction objects."""
