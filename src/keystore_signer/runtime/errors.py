"""
Keystore signer error model

This module provides the error handling framework for keystore unlocking and
transaction signing. Every failure surfaced by the package is a
KeystoreSignerError carrying a stable ErrorCode.

No error raised here may carry key material: messages, details and causes
are limited to structural facts about the input.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes for keystore and signing failures."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Keystore format errors (100-199)
    FORMAT_ERROR = 100
    UNSUPPORTED_VERSION = 101
    UNSUPPORTED_KDF = 102
    UNSUPPORTED_KDF_PARAMS = 103
    UNSUPPORTED_CIPHER = 104
    MALFORMED_KEYSTORE = 105

    # Authentication errors (300-399)
    AUTHENTICATION_FAILED = 300
    WALLET_LOCKED = 301

    # Transaction errors (400-499)
    INVALID_TRANSACTION_FIELD = 400
    SIGNING_FAILED = 401

    # Encoding errors (500-599)
    ENCODING_ERROR = 500


class KeystoreSignerError(Exception):
    """
    Base class for all keystore signer errors.

    Provides structured error information: a message, an error code,
    optional details and an optional underlying cause.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a keystore signer error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class FormatError(KeystoreSignerError):
    """Malformed or unsupported keystore structure."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.FORMAT_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class UnsupportedVersionError(FormatError):
    """Keystore version other than 3."""

    def __init__(self, message: str = "Only V3 wallets are supported",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.UNSUPPORTED_VERSION, details, cause)


class UnsupportedKdfError(FormatError):
    """Key derivation scheme is neither scrypt nor pbkdf2."""

    def __init__(self, message: str = "Unsupported key derivation scheme",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.UNSUPPORTED_KDF, details, cause)


class UnsupportedKdfParamsError(FormatError):
    """KDF parameters are not accepted (prf, cost ceilings)."""

    def __init__(self, message: str = "Unsupported parameters to key derivation",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.UNSUPPORTED_KDF_PARAMS, details, cause)


class UnsupportedCipherError(FormatError):
    """Cipher named by the keystore is not in the cipher registry."""

    def __init__(self, message: str = "Unsupported cipher",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.UNSUPPORTED_CIPHER, details, cause)


class MalformedKeystoreError(FormatError):
    """Keystore document is structurally invalid."""

    def __init__(self, message: str = "Malformed keystore document",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.MALFORMED_KEYSTORE, details, cause)


class AuthenticationFailedError(KeystoreSignerError):
    """
    MAC check failed.

    Covers both a wrong password and a corrupted ciphertext. The message is
    fixed and no cause is attached.
    """

    MESSAGE = "Key derivation failed - possibly wrong passphrase"

    def __init__(self):
        super().__init__(self.MESSAGE, ErrorCode.AUTHENTICATION_FAILED)


class WalletLockedError(KeystoreSignerError):
    """Seed handle has been locked and its seed wiped."""

    def __init__(self, message: str = "Wallet is locked",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.WALLET_LOCKED, details, cause)


class InvalidTransactionFieldError(KeystoreSignerError):
    """Out-of-range or malformed transaction input."""

    def __init__(self, message: str, field: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        details = dict(details or {})
        if field is not None:
            details.setdefault("field", field)
        super().__init__(message, ErrorCode.INVALID_TRANSACTION_FIELD, details, cause)
        self.field = field


class SigningFailedError(KeystoreSignerError):
    """Key material is structurally invalid for secp256k1."""

    def __init__(self, message: str = "Invalid private key",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.SIGNING_FAILED, details, cause)


class EncodingError(KeystoreSignerError):
    """RLP encoding/decoding errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.ENCODING_ERROR, details, cause)


class ErrorHandler:
    """
    Utility class for categorizing errors for callers.
    """

    @staticmethod
    def is_user_correctable(error: Exception) -> bool:
        """
        Check if the caller may re-prompt the user and try again.

        Only a failed password check qualifies; format and transaction
        errors are final for the given input.

        Args:
            error: Exception to check

        Returns:
            True if a different password may succeed
        """
        return isinstance(error, AuthenticationFailedError)

    @staticmethod
    def is_format_error(error: Exception) -> bool:
        """Check if an error rejects the keystore document itself."""
        return isinstance(error, FormatError)


__all__ = [
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
