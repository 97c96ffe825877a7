"""
Ethereum RLP codec.

- rlp.py: encode / decode helpers over the ``rlp`` package
"""

from .rlp import encode, decode, decode_uint

__all__ = [
    "encode",
    "decode",
    "decode_uint",
]
