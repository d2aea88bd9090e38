"""
Hex Encoding Module for cryptokit

Byte buffer <-> hex string conversion shared by the key, signature and
passphrase layers.

Usage:
    bytes_to_hex(b"\\x01\\xff")   # '01ff'
    hex_to_bytes("1ff")          # b'\\x01\\xff'
"""

import re
from typing import Union

from cryptokit.errors import InvalidFormat, InvalidInputType

BytesLike = Union[bytes, bytearray, memoryview]

_HEX_RE = re.compile(r"[0-9A-Fa-f]*")


def ensure_bytes(value, name: str = "input") -> bytes:
    """
    Return `value` as immutable bytes.

    Args:
        value: bytes, bytearray or memoryview
        name: Argument name used in the error message

    Returns:
        bytes: Only the bytes a memoryview actually covers

    Raises:
        InvalidInputType: If `value` is not a byte buffer
    """
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidInputType(f"{name} must be bytes, bytearray or memoryview")
    return bytes(value)


def bytes_to_hex(data: BytesLike) -> str:
    """Lowercase hex of a byte buffer; a memoryview slice encodes only its view."""
    return ensure_bytes(data, "data").hex()


def hex_to_bytes(hex_string: str = "") -> bytes:
    """
    Decode a hex string.

    Odd-length input is left-padded with one '0' nibble, so "1" decodes
    to b"\\x01".

    Raises:
        InvalidInputType: If `hex_string` is not a str
        InvalidFormat: If it contains anything but hex digits (no 0x prefix)
    """
    if not isinstance(hex_string, str):
        raise InvalidInputType("hex input must be a string")
    if not _HEX_RE.fullmatch(hex_string):
        raise InvalidFormat("input must be hex without the 0x prefix")
    if len(hex_string) % 2:
        hex_string = "0" + hex_string
    return bytes.fromhex(hex_string)


def to_bytes(value: Union[BytesLike, str], name: str = "input") -> bytes:
    """Accept either a byte buffer or its hex encoding."""
    if isinstance(value, str):
        return hex_to_bytes(value)
    return ensure_bytes(value, name)
