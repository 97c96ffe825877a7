"""
Unlocked wallet sessions.

unlock_wallet() decrypts a keystore once and returns a SeedHandle that owns
the private key for the rest of the session. sign_transaction() signs with
that handle. Locking the handle wipes the seed; later signing attempts fail
with WalletLockedError.
"""

from __future__ import annotations
import asyncio
import logging
import threading
from typing import Any, Dict, List, Mapping, Optional, Union

from ..config import SignerConfig, get_default_config
from ..crypto.secp256k1 import Secp256k1PrivateKey, to_checksum_address
from ..crypto.secret import SecretBytes
from ..runtime.errors import WalletLockedError
from ..signers.eth import TransactionSigner
from ..tx.transaction import SignedTransaction, TransactionRequest
from .keystore import KeystoreDecryptor, KeystoreDocument, parse_keystore

logger = logging.getLogger(__name__)

KeystoreSource = Union[KeystoreDocument, str, bytes, bytearray, Dict[str, Any]]
Password = Union[str, bytes, bytearray]


class SeedHandle:
    """
    Owner of an unlocked private key.

    The seed stays in a wipeable buffer until lock() is called or the
    handle's context exits. The handle never exposes the seed in its repr.
    """

    def __init__(self, seed: SecretBytes, config: Optional[SignerConfig] = None):
        """
        Initialize handle.

        Args:
            seed: 32-byte private key buffer; ownership passes to the handle
            config: Signing defaults (default chain id)
        """
        self._seed = seed
        self._guard = threading.Lock()
        self._address: Optional[str] = None
        self._signer = TransactionSigner()
        self.config = config or get_default_config()

    @property
    def is_locked(self) -> bool:
        """True once the seed has been wiped."""
        return self._seed.wiped

    def _private_key(self) -> Secp256k1PrivateKey:
        with self._guard:
            if self._seed.wiped:
                raise WalletLockedError()
            return Secp256k1PrivateKey(self._seed.view())

    @property
    def address(self) -> str:
        """Checksummed address of the unlocked key."""
        if self._address is None:
            self._address = to_checksum_address(self._private_key().address)
        return self._address

    def reveal_seed(self) -> bytes:
        """
        Copy of the 32-byte seed.

        The returned bytes cannot be wiped; prefer sign().
        """
        with self._guard:
            if self._seed.wiped:
                raise WalletLockedError()
            return self._seed.reveal()

    def sign(self, tx: Union[TransactionRequest, Mapping[str, Any]],
             chain_id: Optional[int] = None) -> SignedTransaction:
        """
        Sign a transaction with the unlocked key.

        Args:
            tx: TransactionRequest or plain field mapping
            chain_id: Overrides the request's chain id when given; otherwise
                the configured default applies to requests without one

        Returns:
            SignedTransaction
        """
        request = TransactionRequest.from_fields(tx)
        if chain_id is not None:
            request = request.with_chain_id(chain_id)
        elif request.chain_id is None and self.config.default_chain_id is not None:
            request = request.with_chain_id(self.config.default_chain_id)

        with self._guard:
            if self._seed.wiped:
                raise WalletLockedError()
            seed = self._seed.view()
            try:
                private_key = Secp256k1PrivateKey(seed)
            finally:
                seed.release()

        return self._signer.sign(private_key, request)

    def lock(self) -> None:
        """Wipe the seed. Idempotent."""
        with self._guard:
            if not self._seed.wiped:
                self._seed.wipe()
                logger.debug("Wallet locked")

    def __enter__(self) -> SeedHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.lock()

    def __repr__(self) -> str:
        state = "locked" if self.is_locked else "unlocked"
        return f"SeedHandle(<{state}>)"


def unlock_wallet(file_bytes: KeystoreSource, password: Password,
                  config: Optional[SignerConfig] = None) -> SeedHandle:
    """
    Decrypt a V3 keystore and open a signing session.

    Args:
        file_bytes: Keystore file contents (bytes, str, dict or parsed document)
        password: Keystore password

    Returns:
        SeedHandle owning the private key

    Raises:
        FormatError: Unsupported or malformed keystore
        AuthenticationFailedError: Wrong password or corrupted keystore
    """
    decryptor = KeystoreDecryptor(config)
    seed = decryptor.decrypt_seed(file_bytes, password)
    logger.info("Keystore unlocked")
    return SeedHandle(seed, decryptor.config)


async def unlock_wallet_async(file_bytes: KeystoreSource, password: Password,
                              config: Optional[SignerConfig] = None) -> SeedHandle:
    """
    Unlock on a worker thread so the event loop stays responsive during the KDF.

    Format errors are raised before the worker starts. If the awaiting task
    is cancelled, a seed that the worker still produces is wiped and never
    returned.
    """
    decryptor = KeystoreDecryptor(config)
    document = file_bytes if isinstance(file_bytes, KeystoreDocument) else parse_keystore(file_bytes)
    state = threading.Lock()
    cancelled = False
    finished: List[SecretBytes] = []

    def work() -> SecretBytes:
        seed = decryptor.decrypt_seed(document, password)
        with state:
            if cancelled:
                seed.wipe()
            else:
                finished.append(seed)
        return seed

    loop = asyncio.get_running_loop()
    try:
        seed = await loop.run_in_executor(None, work)
    except asyncio.CancelledError:
        # The worker may already have finished; its seed is never delivered.
        with state:
            cancelled = True
            for produced in finished:
                produced.wipe()
        logger.debug("Unlock cancelled")
        raise

    logger.info("Keystore unlocked")
    return SeedHandle(seed, decryptor.config)


def sign_transaction(handle: SeedHandle, tx_fields: Union[TransactionRequest, Mapping[str, Any]],
                     chain_id: Optional[int] = None) -> bytes:
    """
    Sign a transaction with an unlocked wallet.

    Args:
        handle: SeedHandle from unlock_wallet()
        tx_fields: TransactionRequest or plain field mapping
        chain_id: Optional EIP-155 chain id override

    Returns:
        Serialized signed transaction (raw RLP bytes)

    Raises:
        WalletLockedError: The handle has been locked
        InvalidTransactionFieldError: A field is malformed or too wide
        SigningFailedError: The unlocked key is not a valid scalar
    """
    return handle.sign(tx_fields, chain_id=chain_id).raw


__all__ = [
    "SeedHandle",
    "unlock_wallet",
    "unlock_wallet_async",
    "sign_transaction",
]
