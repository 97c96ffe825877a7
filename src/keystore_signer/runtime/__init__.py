"""Runtime helpers for the keystore signer"""

from .errors import (
    ErrorCode,
    KeystoreSignerError,
    FormatError,
    AuthenticationFailedError,
    InvalidTransactionFieldError,
    SigningFailedError,
)
from .encoding import hex_to_bytes, bytes_to_hex, parse_quantity

__all__ = [
    "ErrorCode",
    "KeystoreSignerError",
    "FormatError",
    "AuthenticationFailedError",
    "InvalidTransactionFieldError",
    "SigningFailedError",
    "hex_to_bytes",
    "bytes_to_hex",
    "parse_quantity",
]
