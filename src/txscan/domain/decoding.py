from __future__ import annotations

from typing import Any, Mapping

from .errors import DecodeError
from .models import Block, Transaction
from .value_types import Address, BlockHex, WeiHex


def _str_field(obj: Mapping[str, Any], key: str, where: str) -> str:
    """Missing and null decode to ""; anything that is not a string is a shape error."""
    v = obj.get(key)
    if v is None:
        return ""
    if not isinstance(v, str):
        raise DecodeError(f"{where}.{key}: expected string, got {type(v).__name__}")
    return v


def decode_transaction(raw: Any, idx: int = 0) -> Transaction:
    where = f"transactions[{idx}]"
    if not isinstance(raw, Mapping):
        # hashes-only blocks (params[1] == false) land here
        raise DecodeError(f"{where}: expected object, got {type(raw).__name__}")
    return Transaction(
        hash=_str_field(raw, "hash", where),
        sender=Address(_str_field(raw, "from", where)),
        recipient=Address(_str_field(raw, "to", where)),
        value=WeiHex(_str_field(raw, "value", where)),
        block_number=BlockHex(_str_field(raw, "blockNumber", where)),
    )


def decode_block(result: Any) -> Block:
    """
    Decode an eth_getBlockByNumber result (full transaction objects) into a Block.
    Unknown fields are ignored, missing ones default to empty.
    """
    if result is None:
        raise DecodeError("block not found (null result)")
    if not isinstance(result, Mapping):
        raise DecodeError(f"block: expected object, got {type(result).__name__}")

    raw_txs = result.get("transactions")
    if raw_txs is None:
        raw_txs = []
    if not isinstance(raw_txs, list):
        raise DecodeError(f"block.transactions: expected list, got {type(raw_txs).__name__}")

    return Block(
        number=BlockHex(_str_field(result, "number", "block")),
        transactions=tuple(decode_transaction(t, i) for i, t in enumerate(raw_txs)),
    )
