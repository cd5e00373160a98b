# txscan/domain/errors.py
from __future__ import annotations

from typing import Any


class ChainError(Exception):
    """Base class for everything that can go wrong talking to the node."""


class TransportError(ChainError):
    """The node could not be reached (connect/read failure, timeout)."""


class ProtocolError(ChainError):
    """The node answered, but not with a JSON-RPC object we can read."""


class RPCError(ProtocolError):
    """The node returned a JSON-RPC error object."""

    def __init__(self, method: str, code: Any, message: Any, data: Any = None) -> None:
        self.method = method
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"{method} RPC error code={code} message={message}")


class FormatError(ChainError):
    """An expected field of the result is missing or has the wrong type."""


class DecodeError(ChainError):
    """The result could not be decoded into a block/transaction."""


class ParseError(ChainError, ValueError):
    """A hex quantity is malformed or out of range."""
