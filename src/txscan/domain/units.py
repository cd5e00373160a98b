from __future__ import annotations

import logging
import re

from eth_utils import is_0x_prefixed, remove_0x_prefix

from .errors import ParseError

log = logging.getLogger(__name__)

INT64_MAX = (1 << 63) - 1
WEI_PER_ETHER = 1e18

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


def to_hex_block(n: int) -> str:
    return hex(int(n))


def _hex_body(value: str) -> str:
    if not isinstance(value, str) or not is_0x_prefixed(value):
        raise ParseError(f"not a 0x-prefixed hex quantity: {value!r}")
    body = remove_0x_prefix(value)
    if not _HEX_DIGITS.fullmatch(body):
        raise ParseError(f"invalid hex digits in {value!r}")
    return body


def parse_hex_quantity(value: str) -> int:
    """Parse a 0x-prefixed quantity into a non-negative int that fits a signed 64-bit slot."""
    n = int(_hex_body(value), 16)
    if n > INT64_MAX:
        raise ParseError(f"hex quantity {value!r} exceeds 64-bit range")
    return n


def wei_hex_to_ether(value: str) -> str:
    """
    Convert a hex wei quantity to an ether string with six decimals.

    The wei amount is held in a signed 64-bit range: anything above
    2**63-1 wei (~9.22 ether) clips to that ceiling. Malformed input renders
    as zero. Division is floating point, so very small amounts round away.
    """
    try:
        wei = int(_hex_body(value), 16)
    except ParseError as e:
        log.debug("wei value %r unreadable, using 0: %s", value, e)
        wei = 0
    wei = min(wei, INT64_MAX)
    return "%f" % (float(wei) / WEI_PER_ETHER)
