"""
Legacy Ethereum transactions with optional EIP-155 replay protection.

TransactionRequest holds the unsigned fields as supplied by a wallet form;
SignedTransaction adds the (v, r, s) signature and knows its canonical RLP
serialization. Both are immutable pydantic models.

Field order on the wire:
    unsigned:  [nonce, gasPrice, gasLimit, to, value, data]
    EIP-155:   [nonce, gasPrice, gasLimit, to, value, data, chainId, 0, 0]
    signed:    [nonce, gasPrice, gasLimit, to, value, data, v, r, s]
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from ..codec import rlp
from ..crypto.hash_utils import keccak256
from ..crypto.secp256k1 import public_key_to_address, recover_public_key, to_checksum_address
from ..runtime.encoding import bytes_to_hex, hex_to_bytes, parse_quantity
from ..runtime.errors import EncodingError, InvalidTransactionFieldError

logger = logging.getLogger(__name__)

UINT64_LIMIT = 2 ** 64
UINT256_LIMIT = 2 ** 256
ADDRESS_SIZE = 20

# v offsets
LEGACY_V_OFFSET = 27
EIP155_V_OFFSET = 35


def _byte_field(v: Any) -> Any:
    if v is None:
        return b""
    if isinstance(v, str):
        return hex_to_bytes(v) if v.strip() else b""
    if isinstance(v, (bytearray, memoryview)):
        return bytes(v)
    return v


class TransactionRequest(BaseModel):
    """
    Unsigned transaction fields.

    Numeric fields accept ints, decimal strings and 0x-hex strings. ``to``
    is a 20-byte address (hex or bytes) or empty for contract creation.
    A chain id of 0 or None disables EIP-155 replay protection.
    """
    nonce: int = Field(description="Sender account nonce")
    gas_price: int = Field(validation_alias=AliasChoices("gas_price", "gasPrice"))
    gas_limit: int = Field(validation_alias=AliasChoices("gas_limit", "gasLimit", "gas"))
    to: bytes = Field(default=b"", description="Recipient address; empty creates a contract")
    value: int = Field(default=0, description="Amount in wei")
    data: bytes = Field(default=b"", description="Call data or init code")
    chain_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("chain_id", "chainId"))

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("nonce", "gas_price", "gas_limit", "value", mode="before")
    @classmethod
    def parse_numeric(cls, v: Any) -> int:
        return parse_quantity(v)

    @field_validator("chain_id", mode="before")
    @classmethod
    def parse_chain_id(cls, v: Any) -> Optional[int]:
        if v is None:
            return None
        chain_id = parse_quantity(v)
        return chain_id or None

    @field_validator("to", "data", mode="before")
    @classmethod
    def parse_bytes(cls, v: Any) -> Any:
        return _byte_field(v)

    @field_validator("nonce")
    @classmethod
    def validate_nonce(cls, v: int) -> int:
        if v >= UINT64_LIMIT:
            raise ValueError("nonce exceeds 64-bit width")
        return v

    @field_validator("gas_price", "gas_limit", "value")
    @classmethod
    def validate_uint256(cls, v: int) -> int:
        if v >= UINT256_LIMIT:
            raise ValueError("value exceeds 256-bit width")
        return v

    @field_validator("chain_id")
    @classmethod
    def validate_chain_id(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v >= UINT64_LIMIT:
            raise ValueError("chain id exceeds 64-bit width")
        return v

    @field_validator("to")
    @classmethod
    def validate_to(cls, v: bytes) -> bytes:
        if len(v) not in (0, ADDRESS_SIZE):
            raise ValueError(f"address must be {ADDRESS_SIZE} bytes or empty")
        return v

    @classmethod
    def from_fields(cls, fields: Union[TransactionRequest, Mapping[str, Any]]) -> TransactionRequest:
        """
        Build a request from a plain field mapping.

        Raises:
            InvalidTransactionFieldError: If any field is missing, malformed or too wide
        """
        if isinstance(fields, cls):
            return fields
        if not isinstance(fields, Mapping):
            raise InvalidTransactionFieldError(
                f"Transaction fields must be a mapping, got {type(fields).__name__}"
            )
        try:
            return cls.model_validate(dict(fields))
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise InvalidTransactionFieldError(
                f"Invalid transaction field {field}: {first['msg']}", field=field
            ) from None

    @property
    def is_eip155(self) -> bool:
        """True when the request carries a chain id."""
        return self.chain_id is not None

    @property
    def is_contract_creation(self) -> bool:
        return not self.to

    def with_chain_id(self, chain_id: Optional[int]) -> TransactionRequest:
        """Copy of this request with a different chain id."""
        values = self.model_dump()
        values["chain_id"] = chain_id
        return TransactionRequest.from_fields(values)

    def base_fields(self) -> List[Union[int, bytes]]:
        """The six base fields in wire order."""
        return [self.nonce, self.gas_price, self.gas_limit, self.to, self.value, self.data]

    def signing_fields(self) -> List[Union[int, bytes]]:
        """Fields hashed for signing, including the EIP-155 suffix when active."""
        items = self.base_fields()
        if self.chain_id is not None:
            items += [self.chain_id, 0, 0]
        return items

    def signing_payload(self) -> bytes:
        """Canonical RLP encoding of the unsigned transaction."""
        return rlp.encode(self.signing_fields())

    def signing_hash(self) -> bytes:
        """keccak-256 of the signing payload."""
        return keccak256(self.signing_payload())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary (hex quantities)."""
        result: Dict[str, Any] = {
            "nonce": hex(self.nonce),
            "gasPrice": hex(self.gas_price),
            "gasLimit": hex(self.gas_limit),
            "to": to_checksum_address(self.to) if self.to else None,
            "value": hex(self.value),
            "data": bytes_to_hex(self.data),
        }
        if self.chain_id is not None:
            result["chainId"] = self.chain_id
        return result


class SignedTransaction(TransactionRequest):
    """
    Transaction fields plus the (v, r, s) signature.

    ``raw`` is the canonical serialized form submitted to the network.
    """
    v: int = Field(ge=0)
    r: int = Field(ge=0)
    s: int = Field(ge=0)

    @field_validator("v", "r", "s", mode="before")
    @classmethod
    def parse_signature_part(cls, v: Any) -> int:
        return parse_quantity(v)

    @field_validator("v", "r", "s")
    @classmethod
    def validate_signature_width(cls, v: int) -> int:
        if v >= UINT256_LIMIT:
            raise ValueError("signature value exceeds 256-bit width")
        return v

    @property
    def request(self) -> TransactionRequest:
        """The unsigned request this signature covers."""
        return TransactionRequest.model_validate(
            self.model_dump(exclude={"v", "r", "s"})
        )

    @property
    def recovery_id(self) -> int:
        """Recovery id (0 or 1) encoded in v."""
        if self.chain_id is not None:
            return self.v - (self.chain_id * 2 + EIP155_V_OFFSET)
        return self.v - LEGACY_V_OFFSET

    @property
    def raw(self) -> bytes:
        """Canonical RLP serialization of the signed transaction."""
        return rlp.encode(self.base_fields() + [self.v, self.r, self.s])

    @property
    def tx_hash(self) -> bytes:
        """Transaction hash (keccak-256 of the raw bytes)."""
        return keccak256(self.raw)

    def to_hex(self) -> str:
        """0x-prefixed hex of the raw transaction."""
        return bytes_to_hex(self.raw)

    @property
    def sender(self) -> str:
        """Checksummed address recovered from (v, r, s)."""
        public_key = recover_public_key(self.signing_hash(), self.recovery_id, self.r, self.s)
        return to_checksum_address(public_key_to_address(public_key))

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            "v": hex(self.v),
            "r": hex(self.r),
            "s": hex(self.s),
            "hash": bytes_to_hex(self.tx_hash),
            "raw": self.to_hex(),
        })
        return result

    @classmethod
    def decode(cls, raw: Union[bytes, str]) -> SignedTransaction:
        """
        Parse a serialized signed legacy transaction.

        v of 27 or 28 carries no chain id. v >= 37 encodes an EIP-155 chain id;
        35 and 36 (chain id 0) are rejected.

        Raises:
            EncodingError: If the bytes are not a canonical 9-item RLP list
            InvalidTransactionFieldError: If a decoded field is out of range
        """
        if isinstance(raw, str):
            try:
                raw = hex_to_bytes(raw)
            except ValueError as e:
                raise EncodingError("Raw transaction is not valid hex", cause=e) from e

        items = rlp.decode(raw)
        if not isinstance(items, list) or len(items) != 9:
            raise EncodingError("Signed transaction must be an RLP list of 9 items")
        if any(not isinstance(item, bytes) for item in items):
            raise EncodingError("Signed transaction fields must be RLP strings")

        nonce, gas_price, gas_limit, value, v, r, s = (
            rlp.decode_uint(items[i]) for i in (0, 1, 2, 4, 6, 7, 8)
        )

        if v in (LEGACY_V_OFFSET, LEGACY_V_OFFSET + 1):
            chain_id = None
        elif v >= EIP155_V_OFFSET + 2:
            chain_id = (v - EIP155_V_OFFSET) // 2
        else:
            raise InvalidTransactionFieldError(f"Unsupported v value: {v}", field="v")

        return cls.from_fields({
            "nonce": nonce,
            "gas_price": gas_price,
            "gas_limit": gas_limit,
            "to": items[3],
            "value": value,
            "data": items[5],
            "chain_id": chain_id,
            "v": v,
            "r": r,
            "s": s,
        })


__all__ = [
    "TransactionRequest",
    "SignedTransaction",
    "UINT64_LIMIT",
    "UINT256_LIMIT",
]
