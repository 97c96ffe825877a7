"""
Keystore decryption and unlocked wallet sessions.
"""

from .keystore import (
    KeystoreDocument,
    KeystoreDecryptor,
    CryptoParams,
    ScryptParams,
    Pbkdf2Params,
    parse_keystore,
    unlock,
)
from .wallet import SeedHandle, unlock_wallet, unlock_wallet_async, sign_transaction

__all__ = [
    "KeystoreDocument",
    "KeystoreDecryptor",
    "CryptoParams",
    "ScryptParams",
    "Pbkdf2Params",
    "parse_keystore",
    "unlock",
    "SeedHandle",
    "unlock_wallet",
    "unlock_wallet_async",
    "sign_transaction",
]
