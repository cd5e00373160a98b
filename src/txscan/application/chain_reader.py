from __future__ import annotations

from ..domain.decoding import decode_block
from ..domain.errors import FormatError
from ..domain.models import Block
from ..domain.units import parse_hex_quantity
from ..ports.rpc import ChainReader, RPCClient


class RPCChainReader(ChainReader):
    """ChainReader over any RPCClient."""

    def __init__(self, rpc: RPCClient) -> None:
        self.rpc = rpc

    async def get_latest_block_number(self) -> int:
        result = await self.rpc.call("eth_blockNumber", [])
        if not isinstance(result, str):
            raise FormatError(f"invalid response format for block number: {result!r}")
        return parse_hex_quantity(result)

    async def get_block_by_number(self, block_hex: str) -> Block:
        result = await self.rpc.call("eth_getBlockByNumber", [block_hex, True])
        return decode_block(result)
