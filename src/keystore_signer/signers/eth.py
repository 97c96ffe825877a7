"""
Ethereum transaction signer.

Signs legacy transactions with secp256k1 and Keccak-256 hashing:

1. RLP-encode the unsigned fields (plus chainId, 0, 0 under EIP-155)
2. keccak-256 the encoding
3. Deterministic ECDSA (RFC 6979 nonce, low-s)
4. v = recid + 27, or recid + chainId * 2 + 35 under EIP-155
5. RLP-encode the fields followed by v, r, s
"""

from __future__ import annotations
import logging
from typing import Any, Mapping, Union

from ..crypto.secp256k1 import Secp256k1PrivateKey
from ..crypto.secret import SecretBytes
from ..runtime.errors import SigningFailedError
from ..tx.transaction import (
    EIP155_V_OFFSET,
    LEGACY_V_OFFSET,
    SignedTransaction,
    TransactionRequest,
)

logger = logging.getLogger(__name__)

SeedLike = Union[bytes, bytearray, memoryview, SecretBytes, Secp256k1PrivateKey]
TransactionLike = Union[TransactionRequest, Mapping[str, Any]]


class TransactionSigner:
    """
    Signs transaction requests with a 32-byte private key.

    Holds no state; one instance may sign concurrently from many threads.
    """

    def compute_v(self, recovery_id: int, request: TransactionRequest) -> int:
        """Encode a recovery id into v, applying EIP-155 when a chain id is set."""
        if request.chain_id is not None:
            return recovery_id + request.chain_id * 2 + EIP155_V_OFFSET
        return recovery_id + LEGACY_V_OFFSET

    def sign(self, seed: SeedLike, tx: TransactionLike) -> SignedTransaction:
        """
        Sign a transaction.

        Args:
            seed: 32-byte private key (bytes, SecretBytes or a loaded key)
            tx: TransactionRequest or plain field mapping

        Returns:
            SignedTransaction with v, r, s and its raw serialization

        Raises:
            InvalidTransactionFieldError: If a field is malformed or too wide
            SigningFailedError: If the key is not a valid secp256k1 scalar
        """
        request = TransactionRequest.from_fields(tx)

        if isinstance(seed, Secp256k1PrivateKey):
            private_key = seed
        elif isinstance(seed, SecretBytes):
            private_key = Secp256k1PrivateKey(seed.view())
        else:
            private_key = Secp256k1PrivateKey(seed)

        digest = request.signing_hash()
        recovery_id, r, s = private_key.sign_digest(digest)
        if recovery_id > 1:
            raise SigningFailedError("Signature recovery id cannot be encoded in v")

        v = self.compute_v(recovery_id, request)
        logger.debug("Signed transaction nonce=%d chain_id=%s v=%d",
                     request.nonce, request.chain_id, v)

        return SignedTransaction.from_fields({**request.model_dump(), "v": v, "r": r, "s": s})


def sign(seed: SeedLike, tx: TransactionLike) -> SignedTransaction:
    """Sign a transaction with a 32-byte private key."""
    return TransactionSigner().sign(seed, tx)


__all__ = ["TransactionSigner", "sign"]
