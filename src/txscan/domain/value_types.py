from __future__ import annotations
from typing import NewType

Address  = NewType("Address", str)    # compared verbatim, casing is significant
BlockHex = NewType("BlockHex", str)   # 0x-prefixed hex block number, no padding
WeiHex   = NewType("WeiHex", str)     # 0x-prefixed hex quantity in wei
