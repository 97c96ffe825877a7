"""
Cryptographic primitives for the keystore signer.

Keccak-256 hashing, password-based key derivation, keystore ciphers,
deterministic secp256k1 signing and wipeable secret buffers.
"""

from .hash_utils import keccak256
from .secret import SecretBytes
from .kdf import derive_key
from .cipher import CIPHERS, get_cipher
from .secp256k1 import (
    Secp256k1PrivateKey,
    recover_public_key,
    public_key_to_address,
    private_key_to_address,
    to_checksum_address,
)

__all__ = [
    "keccak256",
    "SecretBytes",
    "derive_key",
    "CIPHERS",
    "get_cipher",
    "Secp256k1PrivateKey",
    "recover_public_key",
    "public_key_to_address",
    "private_key_to_address",
    "to_checksum_address",
]
