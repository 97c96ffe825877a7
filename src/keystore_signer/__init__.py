"""
Keystore Signer

Unlocks Ethereum V3 keystore files with a password and signs legacy
(optionally EIP-155 protected) transactions with the recovered key.

Typical use:

    from keystore_signer import unlock_wallet, sign_transaction

    with unlock_wallet(keystore_bytes, password) as wallet:
        raw = sign_transaction(wallet, {"nonce": 0, "gasPrice": 1,
                                        "gasLimit": 21000, "to": "0x...",
                                        "value": 0, "data": ""})
"""

from .config import SignerConfig
from .logging_config import configure_logging
from .runtime.errors import *
from .keys import (
    KeystoreDocument,
    KeystoreDecryptor,
    SeedHandle,
    parse_keystore,
    unlock,
    unlock_wallet,
    unlock_wallet_async,
    sign_transaction,
)
from .signers import TransactionSigner, sign
from .tx import TransactionRequest, SignedTransaction
from .crypto import keccak256, private_key_to_address, to_checksum_address

__version__ = "0.1.0"
__all__ = [
    "SignerConfig",
    "configure_logging",

    # Keystore
    "KeystoreDocument",
    "KeystoreDecryptor",
    "parse_keystore",
    "unlock",

    # Session
    "SeedHandle",
    "unlock_wallet",
    "unlock_wallet_async",
    "sign_transaction",

    # Signing
    "TransactionSigner",
    "TransactionRequest",
    "SignedTransaction",
    "sign",

    # Helpers
    "keccak256",
    "private_key_to_address",
    "to_checksum_address",

    # Errors
    "ErrorCode",
    "KeystoreSignerError",
    "FormatError",
    "UnsupportedVersionError",
    "UnsupportedKdfError",
    "UnsupportedKdfParamsError",
    "UnsupportedCipherError",
    "MalformedKeystoreError",
    "AuthenticationFailedError",
    "WalletLockedError",
    "InvalidTransactionFieldError",
    "SigningFailedError",
    "EncodingError",
    "ErrorHandler",
]
