"""
TransactionRequest and SignedTransaction model tests.
"""

import pytest

from keystore_signer import (
    EncodingError,
    InvalidTransactionFieldError,
    SignedTransaction,
    TransactionRequest,
    sign,
)
from keystore_signer.codec import rlp
from helpers import vectors


class TestTransactionRequest:
    """Field parsing and wire layout."""

    def test_field_aliases(self):
        camel = TransactionRequest.from_fields({"nonce": 1, "gasPrice": 2, "gasLimit": 3})
        snake = TransactionRequest.from_fields({"nonce": 1, "gas_price": 2, "gas_limit": 3})
        short = TransactionRequest.from_fields({"nonce": 1, "gasPrice": 2, "gas": 3})
        assert camel == snake == short

    @pytest.mark.parametrize("raw,expected", [
        (10, 10),
        ("10", 10),
        ("0x0a", 10),
        ("0XA", 10),
        ("0x", 0),
        ("", 0),
        (b"\x0a", 10),
    ])
    def test_quantity_forms(self, raw, expected):
        request = TransactionRequest.from_fields({"nonce": raw, "gasPrice": 0, "gasLimit": 0})
        assert request.nonce == expected

    def test_boolean_rejected(self):
        with pytest.raises(InvalidTransactionFieldError) as exc_info:
            TransactionRequest.from_fields({"nonce": True, "gasPrice": 0, "gasLimit": 0})
        assert exc_info.value.field == "nonce"

    def test_defaults(self):
        request = TransactionRequest.from_fields({"nonce": 0, "gasPrice": 0, "gasLimit": 0})

        assert request.to == b""
        assert request.value == 0
        assert request.data == b""
        assert request.chain_id is None
        assert request.is_contract_creation
        assert not request.is_eip155

    def test_to_and_data_decoding(self):
        request = TransactionRequest.from_fields({
            "nonce": 0, "gasPrice": 0, "gasLimit": 0,
            "to": "0X" + "AB" * 20, "data": "0xDEADBEEF",
        })
        assert request.to == b"\xab" * 20
        assert request.data == bytes.fromhex("deadbeef")

    def test_none_clears_bytes(self):
        request = TransactionRequest.from_fields({
            "nonce": 0, "gasPrice": 0, "gasLimit": 0, "to": None, "data": None,
        })
        assert request.to == b"" and request.data == b""

    def test_signing_fields(self, eip155_tx):
        request = TransactionRequest.from_fields(eip155_tx)

        assert request.base_fields() == [
            9, 20 * 10 ** 9, 21000, b"\x35" * 20, 10 ** 18, b"",
        ]
        assert request.signing_fields()[6:] == [1, 0, 0]
        assert len(request.with_chain_id(None).signing_fields()) == 6

    def test_frozen(self, eip155_tx):
        request = TransactionRequest.from_fields(eip155_tx)
        with pytest.raises(Exception):
            request.nonce = 10

    def test_from_fields_passthrough(self, eip155_tx):
        request = TransactionRequest.from_fields(eip155_tx)
        assert TransactionRequest.from_fields(request) is request

    def test_to_dict(self, eip155_tx):
        result = TransactionRequest.from_fields(eip155_tx).to_dict()

        assert result["nonce"] == "0x9"
        assert result["to"] == "0x3535353535353535353535353535353535353535"
        assert result["data"] == "0x"
        assert result["chainId"] == 1


class TestSignedTransaction:
    """Serialization, decoding and sender recovery."""

    def test_decode_eip155_example(self):
        decoded = SignedTransaction.decode(vectors.EIP155_RAW)

        assert decoded.nonce == 9
        assert decoded.gas_price == 20 * 10 ** 9
        assert decoded.chain_id == 1
        assert decoded.v == vectors.EIP155_V
        assert decoded.r == vectors.EIP155_R
        assert decoded.s == vectors.EIP155_S
        assert decoded.sender == vectors.EIP155_ADDRESS
        assert decoded.raw == vectors.EIP155_RAW

    def test_decode_hex_string(self):
        decoded = SignedTransaction.decode("0x" + vectors.EIP155_RAW.hex())
        assert decoded.raw == vectors.EIP155_RAW

    def test_request_roundtrip(self, eip155_key, eip155_tx):
        signed = sign(eip155_key, eip155_tx)

        assert signed.request == TransactionRequest.from_fields(eip155_tx)
        assert signed.request.signing_hash() == vectors.EIP155_SIGNING_HASH
        assert signed.recovery_id == 0

    def test_tx_hash(self, eip155_key, eip155_tx):
        from keystore_signer.crypto.hash_utils import keccak256

        signed = sign(eip155_key, eip155_tx)
        assert signed.tx_hash == keccak256(vectors.EIP155_RAW)
        assert signed.to_dict()["raw"] == "0x" + vectors.EIP155_RAW.hex()
        assert signed.to_dict()["v"] == hex(vectors.EIP155_V)

    def test_decode_rejects_wrong_item_count(self):
        with pytest.raises(EncodingError):
            SignedTransaction.decode(rlp.encode([1, 2, 3]))

    def test_decode_rejects_nested_list(self):
        with pytest.raises(EncodingError):
            SignedTransaction.decode(rlp.encode([0, 0, 0, [], 0, b"", 27, 1, 1]))

    def test_decode_rejects_bad_hex(self):
        with pytest.raises(EncodingError):
            SignedTransaction.decode("0xzz")

    # 35 and 36 would mean chain id 0
    @pytest.mark.parametrize("v", [0, 26, 29, 35, 36])
    def test_decode_rejects_unknown_v(self, v):
        raw = rlp.encode([0, 1, 21000, b"", 0, b"", v, 1, 1])
        with pytest.raises(InvalidTransactionFieldError) as exc_info:
            SignedTransaction.decode(raw)
        assert exc_info.value.field == "v"

    def test_decode_rejects_bad_address(self):
        raw = rlp.encode([0, 1, 21000, b"\x01" * 19, 0, b"", 27, 1, 1])
        with pytest.raises(InvalidTransactionFieldError):
            SignedTransaction.decode(raw)
