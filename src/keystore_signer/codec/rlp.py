"""
RLP (Recursive Length Prefix) codec.

Thin layer over the ``rlp`` package for transaction signing payloads and
signed transactions. Items are byte strings or lists of items; integers are
encoded as minimal big-endian byte strings with ``rlp.sedes.big_endian_int``.

Decoding is strict: non-canonical length prefixes and trailing bytes are
rejected so a decoded transaction re-encodes to the same bytes. Failures
surface as EncodingError.
"""

from __future__ import annotations
from typing import List, Union

import rlp as pyrlp
from rlp.exceptions import RLPException
from rlp.sedes import big_endian_int

from ..runtime.errors import EncodingError

RlpItem = Union[bytes, List["RlpItem"]]


def _to_item(obj) -> RlpItem:
    """Normalize ints to big-endian bytes and tuples to lists."""
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj)
    if isinstance(obj, int) and not isinstance(obj, bool):
        if obj < 0:
            raise EncodingError("Cannot RLP-encode negative integer")
        return big_endian_int.serialize(obj)
    if isinstance(obj, (list, tuple)):
        return [_to_item(item) for item in obj]
    raise EncodingError(f"Cannot RLP-encode {type(obj).__name__}")


def encode(obj) -> bytes:
    """RLP-encode bytes, an int or a (nested) list."""
    item = _to_item(obj)
    try:
        return pyrlp.encode(item)
    except RLPException as e:
        raise EncodingError("RLP encoding failed", cause=e) from e


def decode(data: bytes) -> RlpItem:
    """
    Decode exactly one RLP item.

    Raises:
        EncodingError: On malformed, non-canonical, truncated or trailing input
    """
    data = bytes(data)
    if not data:
        raise EncodingError("Empty RLP input")
    try:
        return pyrlp.decode(data, strict=True)
    except RLPException as e:
        raise EncodingError("Malformed RLP input", cause=e) from e
    except IndexError as e:
        # list payload cut short inside a nested prefix
        raise EncodingError("RLP input truncated", cause=e) from e


def decode_uint(data: bytes) -> int:
    """Decode an RLP integer, rejecting leading zero bytes."""
    if not isinstance(data, bytes):
        raise EncodingError("Expected RLP string for integer")
    try:
        return big_endian_int.deserialize(data)
    except RLPException as e:
        raise EncodingError("RLP integer is not minimally encoded", cause=e) from e


__all__ = ["RlpItem", "encode", "decode", "decode_uint"]
