"""
V3 keystore parsing and decryption.

A V3 keystore (Web3 Secret Storage) stores a private key encrypted under a
key derived from the user's password. Unlocking runs the declared KDF,
authenticates the password with a keccak-256 MAC over the ciphertext, then
decrypts and left-pads the private key to 32 bytes.

Every MAC failure raises the same AuthenticationFailedError regardless of
whether the password was wrong or the ciphertext was corrupted.
"""

from __future__ import annotations
import json
import logging
from typing import Annotated, Any, Dict, Literal, Optional, Union

from cryptography.hazmat.primitives import constant_time
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..config import SignerConfig, get_default_config
from ..crypto import cipher as ciphers
from ..crypto.hash_utils import keccak256
from ..crypto.kdf import SUPPORTED_KDFS, SUPPORTED_PRF, check_kdf_limits, derive_key
from ..crypto.secret import SecretBytes
from ..runtime.encoding import hex_to_bytes
from ..runtime.errors import (
    AuthenticationFailedError,
    MalformedKeystoreError,
    UnsupportedKdfError,
    UnsupportedKdfParamsError,
    UnsupportedVersionError,
)

logger = logging.getLogger(__name__)

KEYSTORE_VERSION = 3
SEED_SIZE = 32
MAC_SIZE = 32


def _hex_field(v: Any) -> Any:
    """Decode hex strings (any case, optional 0x); pass bytes through."""
    if isinstance(v, str):
        return hex_to_bytes(v)
    return v


class ScryptParams(BaseModel):
    """scrypt parameters: cost n, block size r, parallelism p."""
    kdf: Literal["scrypt"] = "scrypt"
    n: int = Field(ge=2)
    r: int = Field(ge=1)
    p: int = Field(ge=1)
    dklen: int = Field(ge=32)
    salt: bytes

    model_config = {"frozen": True}

    @field_validator("salt", mode="before")
    @classmethod
    def decode_salt(cls, v: Any) -> Any:
        return _hex_field(v)


class Pbkdf2Params(BaseModel):
    """PBKDF2 parameters: iteration count c and pseudo-random function."""
    kdf: Literal["pbkdf2"] = "pbkdf2"
    c: int = Field(ge=1)
    prf: str
    dklen: int = Field(ge=32)
    salt: bytes

    model_config = {"frozen": True}

    @field_validator("salt", mode="before")
    @classmethod
    def decode_salt(cls, v: Any) -> Any:
        return _hex_field(v)


KdfParams = Annotated[Union[ScryptParams, Pbkdf2Params], Field(discriminator="kdf")]


class CipherParams(BaseModel):
    """Cipher parameters; only the IV is defined by the format."""
    iv: bytes

    model_config = {"frozen": True}

    @field_validator("iv", mode="before")
    @classmethod
    def decode_iv(cls, v: Any) -> Any:
        return _hex_field(v)


class CryptoParams(BaseModel):
    """The ``crypto`` section of a V3 keystore."""
    cipher: str
    ciphertext: bytes
    cipherparams: CipherParams
    kdf: Literal["scrypt", "pbkdf2"]
    kdfparams: KdfParams
    mac: bytes

    model_config = {"frozen": True}

    @field_validator("ciphertext", "mac", mode="before")
    @classmethod
    def decode_hex(cls, v: Any) -> Any:
        return _hex_field(v)

    @model_validator(mode="before")
    @classmethod
    def tag_kdfparams(cls, data: Any) -> Any:
        """Copy the kdf name into kdfparams so the union can dispatch on it."""
        if isinstance(data, dict) and isinstance(data.get("kdfparams"), dict):
            data = dict(data)
            data["kdfparams"] = {**data["kdfparams"], "kdf": data.get("kdf")}
        return data

    @field_validator("mac")
    @classmethod
    def validate_mac(cls, v: bytes) -> bytes:
        if len(v) != MAC_SIZE:
            raise ValueError(f"mac must be {MAC_SIZE} bytes")
        return v


class KeystoreDocument(BaseModel):
    """
    Parsed V3 keystore.

    ``crypto`` is also accepted under the legacy ``Crypto`` key.
    """
    version: int
    crypto: CryptoParams
    id: Optional[str] = None
    address: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_crypto_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and "crypto" not in data and "Crypto" in data:
            data = dict(data)
            data["crypto"] = data.pop("Crypto")
        return data

    @classmethod
    def from_json(cls, source: Union[str, bytes, bytearray, Dict[str, Any]]) -> KeystoreDocument:
        """Parse a keystore from JSON text, bytes or an already-decoded dict."""
        return parse_keystore(source)


def _load_json(source: Union[str, bytes, bytearray, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(source, dict):
        return source
    if isinstance(source, (bytes, bytearray)):
        try:
            source = bytes(source).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedKeystoreError("Keystore is not UTF-8 text", cause=e) from e
    if not isinstance(source, str):
        raise MalformedKeystoreError(f"Unsupported keystore source type: {type(source).__name__}")
    try:
        data = json.loads(source)
    except json.JSONDecodeError as e:
        raise MalformedKeystoreError("Keystore is not valid JSON", details={"position": e.pos}) from e
    if not isinstance(data, dict):
        raise MalformedKeystoreError("Keystore JSON must be an object")
    return data


def parse_keystore(source: Union[str, bytes, bytearray, Dict[str, Any]]) -> KeystoreDocument:
    """
    Validate and parse a V3 keystore.

    Checks run in order: version, kdf, prf, cipher, then full structure.
    No key derivation happens here.

    Args:
        source: JSON text, UTF-8 bytes, or decoded dict

    Returns:
        KeystoreDocument

    Raises:
        UnsupportedVersionError: version is not 3
        UnsupportedKdfError: kdf is not scrypt or pbkdf2
        UnsupportedKdfParamsError: pbkdf2 prf is not hmac-sha256
        UnsupportedCipherError: cipher is not registered
        MalformedKeystoreError: anything else structurally wrong
    """
    data = _load_json(source)

    version = data.get("version")
    if isinstance(version, bool) or version != KEYSTORE_VERSION:
        raise UnsupportedVersionError(details={"version": version})

    crypto = data.get("crypto", data.get("Crypto"))
    if not isinstance(crypto, dict):
        raise MalformedKeystoreError("Keystore has no crypto section")

    kdf = crypto.get("kdf")
    if kdf not in SUPPORTED_KDFS:
        raise UnsupportedKdfError(details={"kdf": kdf})

    kdfparams = crypto.get("kdfparams")
    if not isinstance(kdfparams, dict):
        raise MalformedKeystoreError("Keystore has no kdfparams")
    if kdf == "pbkdf2" and kdfparams.get("prf") != SUPPORTED_PRF:
        raise UnsupportedKdfParamsError("Unsupported parameters to PBKDF2", details={"prf": kdfparams.get("prf")})

    ciphers.get_cipher(crypto.get("cipher"))

    try:
        document = KeystoreDocument.model_validate(data)
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise MalformedKeystoreError("Malformed keystore document", details={"fields": fields}) from None

    spec = ciphers.get_cipher(document.crypto.cipher)
    if len(document.crypto.cipherparams.iv) != spec.iv_size:
        raise MalformedKeystoreError(f"IV must be {spec.iv_size} bytes for {spec.name}")

    return document


def _password_bytes(password: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(password, str):
        return password.encode("utf-8")
    if isinstance(password, (bytes, bytearray)):
        return bytes(password)
    raise TypeError(f"Password must be str or bytes, got {type(password).__name__}")


class KeystoreDecryptor:
    """
    Decrypts V3 keystores into 32-byte private keys.

    Stateless apart from its configuration; safe to share between threads.
    """

    def __init__(self, config: Optional[SignerConfig] = None):
        """
        Initialize decryptor.

        Args:
            config: Cost ceilings; defaults to the environment configuration
        """
        self.config = config or get_default_config()

    def _check_supported(self, document: KeystoreDocument) -> None:
        if document.version != KEYSTORE_VERSION:
            raise UnsupportedVersionError(details={"version": document.version})
        params = document.crypto.kdfparams
        if params.kdf not in SUPPORTED_KDFS:
            raise UnsupportedKdfError(details={"kdf": params.kdf})
        check_kdf_limits(params, self.config)
        ciphers.get_cipher(document.crypto.cipher)

    def decrypt_seed(self, document: Union[KeystoreDocument, str, bytes, Dict[str, Any]],
                     password: Union[str, bytes, bytearray]) -> SecretBytes:
        """
        Decrypt a keystore into a wipeable seed buffer.

        Args:
            document: Parsed keystore or raw JSON source
            password: Keystore password

        Returns:
            SecretBytes holding exactly 32 bytes; the caller owns and wipes it

        Raises:
            FormatError: Unsupported or malformed keystore (before any KDF work)
            AuthenticationFailedError: MAC mismatch
        """
        if not isinstance(document, KeystoreDocument):
            document = parse_keystore(document)
        self._check_supported(document)

        crypto = document.crypto
        logger.debug("Unlocking keystore (kdf=%s, cipher=%s)", crypto.kdf, crypto.cipher)

        with derive_key(_password_bytes(password), crypto.kdfparams) as derived:
            mac_input = bytearray(derived.view(16, 32))
            mac_input.extend(crypto.ciphertext)
            try:
                mac = keccak256(mac_input)
            finally:
                mac_input[:] = bytes(len(mac_input))

            if not constant_time.bytes_eq(mac, crypto.mac):
                logger.info("Keystore MAC check failed")
                raise AuthenticationFailedError()

            try:
                plaintext = bytearray(ciphers.decrypt(
                    crypto.cipher, bytes(derived.view(0, 16)), crypto.cipherparams.iv, crypto.ciphertext
                ))
            except ValueError as e:
                # CBC padding or block alignment; the MAC already matched
                raise MalformedKeystoreError("Ciphertext does not decrypt cleanly", cause=e) from e

        try:
            if len(plaintext) > SEED_SIZE:
                raise MalformedKeystoreError(f"Decrypted key longer than {SEED_SIZE} bytes")
            padded = bytearray(SEED_SIZE - len(plaintext))
            padded.extend(plaintext)
            return SecretBytes(padded)
        finally:
            plaintext[:] = bytes(len(plaintext))

    def unlock(self, document: Union[KeystoreDocument, str, bytes, Dict[str, Any]],
               password: Union[str, bytes, bytearray]) -> bytes:
        """
        Decrypt a keystore and return the 32-byte seed.

        Prefer decrypt_seed() or keys.wallet.unlock_wallet() when the seed
        should be wiped after use.
        """
        with self.decrypt_seed(document, password) as seed:
            return seed.reveal()


def unlock(document: Union[KeystoreDocument, str, bytes, Dict[str, Any]],
           password: Union[str, bytes, bytearray],
           config: Optional[SignerConfig] = None) -> bytes:
    """
    Decrypt a V3 keystore with a password.

    Args:
        document: Parsed keystore or raw JSON source
        password: Keystore password
        config: Optional cost ceilings

    Returns:
        32-byte private key
    """
    return KeystoreDecryptor(config).unlock(document, password)


__all__ = [
    "KEYSTORE_VERSION",
    "ScryptParams",
    "Pbkdf2Params",
    "CipherParams",
    "CryptoParams",
    "KeystoreDocument",
    "KeystoreDecryptor",
    "parse_keystore",
    "unlock",
]
