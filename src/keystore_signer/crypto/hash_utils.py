"""
Hash utilities for Ethereum keystores and transactions.

Ethereum uses the original Keccak-256 padding, which differs from the
standardized SHA3-256 in hashlib.
"""

from Crypto.Hash import keccak


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum's hash function).

    Args:
        data: Input data to hash (bytes, bytearray or memoryview)

    Returns:
        32-byte Keccak-256 hash
    """
    return keccak.new(digest_bits=256, data=data).digest()


def keccak256_hex(data: bytes) -> str:
    """Keccak-256 as lowercase hex without prefix."""
    return keccak256(data).hex()


__all__ = ["keccak256", "keccak256_hex"]
