"""
confidential_core.utils
-----------------------
Hex helpers for the wire representation (``0x``-prefixed, lowercase,
two digits per byte), address canonicalization and timestamping.
"""

from __future__ import annotations
import re, time

from .errors import InvalidEncoding

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def from_hex(value: str) -> bytes:
    """Decode an optionally ``0x``-prefixed hex string. Odd length or
    non-hex characters raise InvalidEncoding."""
    if not isinstance(value, str):
        raise InvalidEncoding(f"expected hex string, got {type(value).__name__}")
    body = value[2:] if value[:2] in ("0x", "0X") else value
    if len(body) % 2 or not _HEX_RE.fullmatch(body):
        raise InvalidEncoding(f"malformed hex: {value!r}")
    return bytes.fromhex(body)


def canonical_address(address: str) -> str:
    return address.lower()


def now_hex_ms() -> str:
    # Milliseconds since the epoch, hex-encoded like an EthHex quantity
    return hex(int(time.time() * 1000))
