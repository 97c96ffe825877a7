"""
Hex and integer helpers shared by the keystore parser and transaction codec.
"""

from __future__ import annotations
from typing import Union


def strip_hex_prefix(value: str) -> str:
    """Remove an optional 0x/0X prefix."""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def hex_to_bytes(value: str) -> bytes:
    """
    Decode a hex string in any case, with or without a 0x prefix.

    Raises:
        ValueError: If the string is not valid hex
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected hex string, got {type(value).__name__}")
    digits = strip_hex_prefix(value.strip())
    if len(digits) % 2:
        raise ValueError("Hex string has odd length")
    return bytes.fromhex(digits)


def bytes_to_hex(value: bytes, prefix: bool = True) -> str:
    """Encode bytes as lowercase hex."""
    encoded = value.hex()
    return "0x" + encoded if prefix else encoded


def int_to_big_endian(value: int) -> bytes:
    """Minimal big-endian encoding; zero encodes as empty bytes."""
    if value < 0:
        raise ValueError("Cannot encode negative integer")
    if value == 0:
        return b""
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def big_endian_to_int(value: bytes) -> int:
    """Decode big-endian bytes; empty bytes decode to zero."""
    return int.from_bytes(value, "big")


def parse_quantity(value: Union[int, str, bytes]) -> int:
    """
    Parse a numeric quantity as produced by wallet forms.

    Accepts ints, decimal strings, 0x-prefixed hex strings, and
    big-endian bytes. Booleans are rejected.

    Raises:
        ValueError: If the value cannot be interpreted as a non-negative integer
    """
    if isinstance(value, bool):
        raise ValueError("Boolean is not a valid quantity")
    if isinstance(value, int):
        result = value
    elif isinstance(value, (bytes, bytearray)):
        result = big_endian_to_int(bytes(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            result = 0
        elif text[:2] in ("0x", "0X"):
            digits = text[2:]
            result = int(digits, 16) if digits else 0
        else:
            result = int(text, 10)
    else:
        raise ValueError(f"Unsupported quantity type: {type(value).__name__}")

    if result < 0:
        raise ValueError("Quantity must be non-negative")
    return result


__all__ = [
    "strip_hex_prefix",
    "hex_to_bytes",
    "bytes_to_hex",
    "int_to_big_endian",
    "big_endian_to_int",
    "parse_quantity",
]
