"""
Symmetric ciphers named by V3 keystores.

The keystore's ``cipher`` field selects an entry from CIPHERS. Standard
keystores use aes-128-ctr; aes-128-cbc (PKCS#7 padded) is accepted for older
wallet exports.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..runtime.errors import UnsupportedCipherError


@dataclass(frozen=True)
class CipherSpec:
    """Registry entry: key/IV sizes and a decrypt function."""
    name: str
    key_size: int
    iv_size: int
    decrypt: Callable[[bytes, bytes, bytes], bytes]


def _aes_ctr_decrypt(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    decryptor = Cipher(algorithms.AES(key), modes.CTR(iv)).decryptor()
    return decryptor.update(ciphertext) + decryptor.finalize()


def _aes_cbc_decrypt(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


CIPHERS: Dict[str, CipherSpec] = {
    "aes-128-ctr": CipherSpec("aes-128-ctr", 16, 16, _aes_ctr_decrypt),
    "aes-128-cbc": CipherSpec("aes-128-cbc", 16, 16, _aes_cbc_decrypt),
}


def get_cipher(name: str) -> CipherSpec:
    """
    Look up a cipher by its keystore name (case-insensitive).

    Raises:
        UnsupportedCipherError: If the cipher is not registered
    """
    spec = CIPHERS.get(name.lower()) if isinstance(name, str) else None
    if spec is None:
        raise UnsupportedCipherError(f"Unsupported cipher: {name}", details={"cipher": name})
    return spec


def decrypt(name: str, key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """
    Decrypt ciphertext with the named cipher.

    Args:
        name: Keystore cipher name
        key: Encryption key (derivedKey[0:16])
        iv: Initialization vector
        ciphertext: Encrypted private key

    Returns:
        Plaintext bytes
    """
    spec = get_cipher(name)
    return spec.decrypt(bytes(key[:spec.key_size]), iv, ciphertext)


__all__ = ["CipherSpec", "CIPHERS", "get_cipher", "decrypt"]
