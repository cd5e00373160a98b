from __future__ import annotations

from typing import Any, Iterable

import pytest

from txscan.domain.errors import ChainError
from txscan.domain.models import Block, Transaction
from txscan.domain.units import to_hex_block

ALICE = "0x1111111111111111111111111111111111111111"
BOB   = "0x2222222222222222222222222222222222222222"
CAROL = "0x3333333333333333333333333333333333333333"

ONE_ETHER = "0xde0b6b3a7640000"


def tx(n: int, idx: int, sender: str, recipient: str, value: str = ONE_ETHER) -> Transaction:
    return Transaction(
        hash=f"0x{n:04x}{idx:060x}",
        sender=sender,
        recipient=recipient,
        value=value,
        block_number=to_hex_block(n),
    )


class FakeChainReader:
    """In-memory chain: `blocks` by number, `failing` numbers raise."""

    def __init__(self, blocks: dict[int, Iterable[Transaction]] | None = None, *,
                 latest: int = 100, failing: Iterable[int] = (), head_error: ChainError | None = None) -> None:
        self.blocks = {n: Block(to_hex_block(n), tuple(txs)) for n, txs in (blocks or {}).items()}
        self.latest = latest
        self.failing = set(failing)
        self.head_error = head_error
        self.requested: list[str] = []

    async def get_latest_block_number(self) -> int:
        if self.head_error is not None:
            raise self.head_error
        return self.latest

    async def get_block_by_number(self, block_hex: str) -> Block:
        self.requested.append(block_hex)
        n = int(block_hex, 16)
        if n in self.failing:
            raise ChainError(f"node unavailable for {block_hex}")
        return self.blocks.get(n, Block(block_hex, ()))


class CollectingSink:
    def __init__(self) -> None:
        self.emitted: list[tuple[Block, Transaction]] = []

    async def emit(self, block: Block, tx: Transaction) -> None:
        self.emitted.append((block, tx))


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeRPC:
    """RPCClient double answering from a method -> result table."""

    def __init__(self, results: dict[str, Any]) -> None:
        self.results = results
        self.calls: list[tuple[str, list[Any]]] = []

    async def call(self, method: str, params=()) -> Any:
        self.calls.append((method, list(params)))
        res = self.results[method]
        if isinstance(res, Exception):
            raise res
        return res

    async def aclose(self) -> None:
        pass


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()
