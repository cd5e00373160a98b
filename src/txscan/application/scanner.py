from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from ..domain.models import ScanRange, ScanStats
from ..domain.units import to_hex_block
from ..ports.rpc import ChainReader
from ..ports.sink import MatchSink
from .utils import _now_ts_str, _scan_id

log = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
OnBlock = Callable[[int, bool], None]   # (block number, fetched ok)


@dataclass(slots=True, frozen=True)
class Pacer:
    """Fixed delay between two block fetches of one scan."""
    interval_s: float = 5.0
    sleep: Sleep = field(default=asyncio.sleep)

    async def pause(self) -> None:
        if self.interval_s > 0:
            await self.sleep(self.interval_s)


class BlockScanner:
    """
    Walks an inclusive block range one block at a time and reports every
    transaction sent from or to an address.

    Blocks are fetched strictly in ascending order, never two at once. A block
    that cannot be fetched is logged and skipped. Every block, fetched or not,
    is followed by a pacing pause so a long range does not hammer the node.
    """

    def __init__(self, reader: ChainReader, pacer: Pacer | None = None) -> None:
        self.reader = reader
        self.pacer = pacer or Pacer()

    async def scan(self, address: str, start_block: int, end_block: int, sink: MatchSink,
                   on_block: Optional[OnBlock] = None) -> ScanStats:
        rng = ScanRange(start_block, end_block)
        sid = _scan_id(address, rng.start, rng.end, _now_ts_str())
        log.info("[%s] scanning %s over blocks %d..%d (%d blocks)", sid, address, rng.start, rng.end, rng.span())

        blocks_ok = blocks_failed = seen = matches = 0
        t0 = time.monotonic()

        for n in rng.block_numbers():
            block_hex = to_hex_block(n)
            ok = False
            try:
                block = await self.reader.get_block_by_number(block_hex)
            except Exception as e:
                blocks_failed += 1
                log.warning("[%s] error fetching block %s: %s: %s", sid, block_hex, type(e).__name__, e)
            else:
                ok = True
                blocks_ok += 1
                seen += len(block.transactions)
                for tx in block.transactions:
                    if tx.touches(address):
                        matches += 1
                        await sink.emit(block, tx)
            if on_block is not None:
                on_block(n, ok)
            await self.pacer.pause()

        stats = ScanStats(blocks_ok=blocks_ok, blocks_failed=blocks_failed,
                          transactions_seen=seen, matches=matches)
        log.info("[%s] done in %.2fs: %s", sid, time.monotonic() - t0, stats.as_dict())
        return stats
