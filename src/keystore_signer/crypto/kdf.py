"""
Password-based key derivation for V3 keystores.

Supports the two schemes allowed by the keystore format: scrypt
(pycryptodome) and PBKDF2-HMAC-SHA256 (cryptography). Parameters arrive as one of the KDF parameter models
from keys.keystore; dispatch is a single match on the ``kdf`` tag.
"""

from __future__ import annotations
import logging
import time
from typing import Union, TYPE_CHECKING

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from Crypto.Protocol.KDF import scrypt

from .secret import SecretBytes
from ..config import SignerConfig
from ..runtime.errors import UnsupportedKdfError, UnsupportedKdfParamsError

if TYPE_CHECKING:
    from ..keys.keystore import ScryptParams, Pbkdf2Params

logger = logging.getLogger(__name__)

SUPPORTED_KDFS = ("scrypt", "pbkdf2")
SUPPORTED_PRF = "hmac-sha256"


def check_kdf_limits(params: Union["ScryptParams", "Pbkdf2Params"], config: SignerConfig) -> None:
    """
    Reject parameters outside the configured cost ceilings.

    Runs before any derivation work so a hostile keystore cannot pin the CPU.

    Raises:
        UnsupportedKdfParamsError: If a ceiling is exceeded
    """
    if params.kdf == "scrypt":
        if params.n < 2 or params.n & (params.n - 1):
            raise UnsupportedKdfParamsError("scrypt n must be a power of two greater than 1")
        if params.n > config.max_scrypt_n:
            raise UnsupportedKdfParamsError(
                "scrypt n exceeds configured limit",
                details={"n": params.n, "limit": config.max_scrypt_n},
            )
        if params.r > config.max_scrypt_r or params.p > config.max_scrypt_p:
            raise UnsupportedKdfParamsError(
                "scrypt r/p exceed configured limit",
                details={"r": params.r, "p": params.p},
            )
    elif params.kdf == "pbkdf2":
        if params.prf != SUPPORTED_PRF:
            raise UnsupportedKdfParamsError("Unsupported parameters to PBKDF2", details={"prf": params.prf})
        if params.c > config.max_pbkdf2_iterations:
            raise UnsupportedKdfParamsError(
                "PBKDF2 iteration count exceeds configured limit",
                details={"c": params.c, "limit": config.max_pbkdf2_iterations},
            )
    else:
        raise UnsupportedKdfError(details={"kdf": params.kdf})


def _run_kdf(password: bytes, params: Union["ScryptParams", "Pbkdf2Params"]) -> bytes:
    if params.kdf == "scrypt":
        return scrypt(password, params.salt, params.dklen, N=params.n, r=params.r, p=params.p)
    if params.kdf == "pbkdf2":
        if params.prf != SUPPORTED_PRF:
            raise UnsupportedKdfParamsError("Unsupported parameters to PBKDF2", details={"prf": params.prf})
        kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=params.dklen,
                         salt=params.salt, iterations=params.c)
        return kdf.derive(password)
    raise UnsupportedKdfError(details={"kdf": params.kdf})


def derive_key(password: bytes, params: Union["ScryptParams", "Pbkdf2Params"]) -> SecretBytes:
    """
    Derive key material from a password.

    scrypt runs on pycryptodome, which has no built-in memory cap; the
    configured ceilings checked by check_kdf_limits() bound the work.

    Args:
        password: Password bytes
        params: Parsed scrypt or PBKDF2 parameters

    Returns:
        SecretBytes holding ``dklen`` bytes; the caller wipes it

    Raises:
        UnsupportedKdfError: If the scheme is unknown
        UnsupportedKdfParamsError: If the primitive rejects the parameters
            or cannot allocate the memory they require
    """
    started = time.perf_counter()

    try:
        derived = SecretBytes(_run_kdf(bytes(password), params))
    except ValueError as e:
        raise UnsupportedKdfParamsError(f"Rejected {params.kdf} parameters", cause=e) from e
    except MemoryError as e:
        raise UnsupportedKdfParamsError(
            f"Not enough memory to run {params.kdf} with these parameters", cause=e
        ) from e

    logger.debug("Derived %d-byte key with %s in %.3fs",
                 len(derived), params.kdf, time.perf_counter() - started)
    return derived


__all__ = ["derive_key", "check_kdf_limits", "SUPPORTED_KDFS", "SUPPORTED_PRF"]
