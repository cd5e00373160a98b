from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterator
from .value_types import Address, BlockHex, WeiHex
from .units import wei_hex_to_ether

@dataclass(slots=True, frozen=True)
class RPCRequest:
    method: str
    params: tuple[Any, ...] = ()
    jsonrpc: str = "2.0"
    id: int = 1     # calls on one client are sequential, no correlation needed

    def to_payload(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "method": self.method, "params": list(self.params), "id": self.id}

@dataclass(slots=True, frozen=True)
class ScanRange:
    start: int
    end: int
    def span(self) -> int: return max(0, self.end - self.start + 1)
    def block_numbers(self) -> Iterator[int]: return iter(range(self.start, self.end + 1))

@dataclass(slots=True, frozen=True)
class Transaction:
    hash: str
    sender: Address
    recipient: Address          # "" for contract creation
    value: WeiHex
    block_number: BlockHex

    def touches(self, address: str) -> bool:
        # exact string equality, no case folding
        return self.sender == address or self.recipient == address

@dataclass(slots=True, frozen=True)
class Block:
    number: BlockHex
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)

@dataclass(slots=True, frozen=True)
class Match:
    block_number: str
    tx_hash: str
    sender: str
    recipient: str
    value_ether: str

    @classmethod
    def of(cls, block: Block, tx: Transaction) -> "Match":
        return cls(
            block_number=block.number,
            tx_hash=tx.hash,
            sender=tx.sender,
            recipient=tx.recipient,
            value_ether=wei_hex_to_ether(tx.value),
        )

    def line(self) -> str:
        return (f"Transaction: Block {self.block_number} | Hash: {self.tx_hash} | "
                f"From: {self.sender} | To: {self.recipient} | Value: {self.value_ether} ETH")

@dataclass(slots=True, frozen=True)
class ScanStats:
    blocks_ok: int = 0
    blocks_failed: int = 0
    transactions_seen: int = 0
    matches: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"blocks_ok": self.blocks_ok, "blocks_failed": self.blocks_failed,
                "transactions_seen": self.transactions_seen, "matches": self.matches}
