"""
Custom exceptions for oidgen

A small, well-defined error hierarchy so callers can tell a bad hex string
apart from a corrupted legacy payload without parsing messages.

Fun fact: The first computer bug was an actual moth found in a relay
of the Harvard Mark II computer in 1947. Ours are mostly typos in hex strings.
"""

from typing import Any


class OidError(Exception):
    """Base exception for all oidgen errors"""

    pass


class InvalidIdentifier(OidError, ValueError):
    """
    Raised when a candidate value cannot be decoded into an ObjectId

    Covers hex strings that are not exactly 24 hexadecimal characters,
    raw buffers that are not exactly 12 bytes, and short reads from a stream.
    The offending input is kept on ``value`` for diagnostics.
    """

    def __init__(self, value: Any, message: str = "") -> None:
        self.value = value
        super().__init__(message or f"'{value}' is not a valid object id")


class MalformedLegacyData(OidError, TypeError):
    """
    Raised when legacy identifier data is neither a 12-byte buffer
    nor a sequence of 12 integers in the range 0-255
    """

    def __init__(self, value: Any) -> None:
        self.value = repr(value)
        super().__init__(f"Could not convert {self.value} into an ObjectId")
