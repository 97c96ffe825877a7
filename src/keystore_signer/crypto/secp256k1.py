"""
SECP256K1 operations for Ethereum transaction signing.

Provides recoverable, deterministic ECDSA signatures matching the Ethereum
convention: RFC 6979 nonces (HMAC-SHA256), low-s normalization (EIP-2) and
a recovery id that lets verifiers rebuild the public key from (r, s).

Signing uses the ``ecdsa`` library, with the nonce always derived by
``ecdsa.rfc6979`` so signing never depends on ambient randomness. Public
key recovery uses ``eth_keys`` and EIP-55 checksums use ``eth_utils``.
"""

from __future__ import annotations
import hashlib
from typing import Tuple

import eth_utils
from ecdsa import SECP256k1, SigningKey
from ecdsa import numbertheory, rfc6979
from eth_keys import keys as eth_keys
from eth_keys.exceptions import BadSignature
from eth_utils import ValidationError

from .hash_utils import keccak256
from ..runtime.errors import SigningFailedError
from ..runtime.encoding import hex_to_bytes

CURVE = SECP256k1
GENERATOR = SECP256k1.generator
N = SECP256k1.order
HALF_N = N // 2

PRIVATE_KEY_SIZE = 32
PUBLIC_KEY_SIZE = 64
ADDRESS_SIZE = 20


def validate_private_key(seed: bytes) -> int:
    """
    Check that seed is a usable secp256k1 scalar.

    Args:
        seed: 32-byte big-endian private key

    Returns:
        The private scalar

    Raises:
        SigningFailedError: If the seed is not 32 bytes or not in [1, n-1]
    """
    if not isinstance(seed, (bytes, bytearray, memoryview)) or len(seed) != PRIVATE_KEY_SIZE:
        raise SigningFailedError(f"Private key must be {PRIVATE_KEY_SIZE} bytes")
    secexp = int.from_bytes(bytes(seed), "big")
    if not 0 < secexp < N:
        raise SigningFailedError("Private key scalar out of range")
    return secexp


def sign_digest(digest: bytes, secexp: int) -> Tuple[int, int, int]:
    """
    Sign a 32-byte digest deterministically.

    Args:
        digest: Message hash (keccak-256 for Ethereum transactions)
        secexp: Validated private scalar

    Returns:
        Tuple of (recovery id, r, s) with s in the lower half of the order
    """
    if len(digest) != 32:
        raise SigningFailedError("Digest must be 32 bytes")

    e = int.from_bytes(digest, "big")
    retry = 0
    while True:
        k = rfc6979.generate_k(N, secexp, hashlib.sha256, digest, retry_gen=retry)
        point = GENERATOR * k
        r = point.x() % N
        if r != 0:
            s = numbertheory.inverse_mod(k, N) * (e + r * secexp) % N
            if s != 0:
                recid = (point.y() & 1) | (2 if point.x() >= N else 0)
                if s > HALF_N:
                    s = N - s
                    recid ^= 1
                return recid, r, s
        retry += 1


def recover_public_key(digest: bytes, recid: int, r: int, s: int) -> bytes:
    """
    Recover the 64-byte uncompressed public key (x || y) from a signature.

    Raises:
        SigningFailedError: If the signature does not correspond to any key
    """
    if recid not in (0, 1):
        raise SigningFailedError("Recovery id out of range")
    if not (0 < r < N and 0 < s < N):
        raise SigningFailedError("Signature component out of range")

    try:
        signature = eth_keys.Signature(vrs=(recid, r, s))
        public_key = signature.recover_public_key_from_msg_hash(bytes(digest))
    except (BadSignature, ValidationError) as e:
        raise SigningFailedError("Signature does not recover a public key", cause=e) from e
    return public_key.to_bytes()


def public_key_to_address(public_key: bytes) -> bytes:
    """
    Compute the 20-byte Ethereum address of a public key.

    Accepts the raw 64-byte form or the 65-byte form with 0x04 prefix.
    """
    if len(public_key) == 65 and public_key[0] == 0x04:
        public_key = public_key[1:]
    elif len(public_key) != PUBLIC_KEY_SIZE:
        raise ValueError(f"Invalid Ethereum public key length: {len(public_key)}")
    return keccak256(public_key)[-ADDRESS_SIZE:]


def to_checksum_address(address) -> str:
    """
    Format an address with EIP-55 mixed-case checksum.

    Args:
        address: 20 address bytes or a hex string

    Returns:
        0x-prefixed checksummed address
    """
    raw = hex_to_bytes(address) if isinstance(address, str) else bytes(address)
    if len(raw) != ADDRESS_SIZE:
        raise ValueError(f"Address must be {ADDRESS_SIZE} bytes, got {len(raw)}")
    return eth_utils.to_checksum_address(raw)


class Secp256k1PrivateKey:
    """
    SECP256K1 private key for Ethereum signatures.

    Holds only the scalar needed to sign; the caller owns the seed bytes and
    their lifetime.
    """

    def __init__(self, private_key_bytes: bytes):
        """
        Initialize from a 32-byte private key.

        Raises:
            SigningFailedError: If the key is structurally invalid
        """
        self._secexp = validate_private_key(private_key_bytes)
        self._public_key_bytes = None

    @property
    def public_key_bytes(self) -> bytes:
        """Uncompressed public key without prefix (64 bytes)."""
        if self._public_key_bytes is None:
            signing_key = SigningKey.from_secret_exponent(self._secexp, curve=CURVE)
            self._public_key_bytes = signing_key.get_verifying_key().to_string()
        return self._public_key_bytes

    @property
    def address(self) -> bytes:
        """20-byte Ethereum address."""
        return public_key_to_address(self.public_key_bytes)

    def sign_digest(self, digest: bytes) -> Tuple[int, int, int]:
        """Sign a 32-byte digest; returns (recovery id, r, s)."""
        return sign_digest(digest, self._secexp)

    def __repr__(self) -> str:
        return f"Secp256k1PrivateKey(address={to_checksum_address(self.address)})"


def private_key_to_address(seed: bytes) -> bytes:
    """Derive the 20-byte address controlled by a private key."""
    return Secp256k1PrivateKey(seed).address


__all__ = [
    "CURVE",
    "N",
    "HALF_N",
    "Secp256k1PrivateKey",
    "validate_private_key",
    "sign_digest",
    "recover_public_key",
    "public_key_to_address",
    "private_key_to_address",
    "to_checksum_address",
]
