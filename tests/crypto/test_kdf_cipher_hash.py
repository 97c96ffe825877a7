"""
Hashing, key derivation, cipher registry and secret buffer tests.
"""

import pytest

from keystore_signer.config import SignerConfig
from keystore_signer.crypto import cipher
from keystore_signer.crypto import kdf as kdf_module
from keystore_signer.crypto.hash_utils import keccak256, keccak256_hex
from keystore_signer.crypto.kdf import check_kdf_limits, derive_key
from keystore_signer.crypto.secret import SecretBytes
from keystore_signer.keys.keystore import Pbkdf2Params, ScryptParams
from keystore_signer.runtime.errors import UnsupportedCipherError, UnsupportedKdfParamsError

EMPTY_KECCAK = "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


class TestKeccak:

    def test_empty(self):
        assert keccak256(b"").hex() == EMPTY_KECCAK
        assert keccak256_hex(b"") == EMPTY_KECCAK

    def test_accepts_buffers(self):
        assert keccak256(bytearray(b"abc")) == keccak256(b"abc")
        assert keccak256(memoryview(b"abc")) == keccak256(b"abc")

    def test_not_sha3(self):
        """Ethereum uses pre-standard Keccak, not FIPS SHA3-256."""
        import hashlib
        assert keccak256(b"").hex() != hashlib.sha3_256(b"").hexdigest()


class TestDeriveKey:
    """Key derivation through the cryptography primitives."""

    def test_pbkdf2_rfc7914_vector(self):
        """PBKDF2-HMAC-SHA256 test vector from RFC 7914 section 11."""
        params = Pbkdf2Params(c=1, prf="hmac-sha256", dklen=64, salt=b"salt".hex())
        with derive_key(b"passwd", params) as derived:
            assert derived.reveal().hex().startswith("55ac046e56e3089fec1691c22544b605")

    def test_scrypt_rfc7914_vector(self):
        """scrypt test vector from RFC 7914 section 12."""
        params = ScryptParams(n=1024, r=8, p=16, dklen=64, salt=b"NaCl".hex())
        with derive_key(b"password", params) as derived:
            assert derived.reveal().hex().startswith("fdbabe1c9d3472007856e7190d01e9fe")

    def test_result_is_secret(self):
        params = Pbkdf2Params(c=1, prf="hmac-sha256", dklen=32, salt="00")
        derived = derive_key(b"pw", params)
        assert isinstance(derived, SecretBytes)
        assert len(derived) == 32
        derived.wipe()

    def test_scrypt_beyond_32_mib(self):
        """n=2**15, r=8 needs 32 MiB of working memory and must still derive."""
        params = ScryptParams(n=2 ** 15, r=8, p=1, dklen=32, salt="00" * 32)
        with derive_key(b"pw", params) as derived:
            assert len(derived) == 32

    def test_out_of_memory_is_typed(self, monkeypatch):
        def exhausted(*args, **kwargs):
            raise MemoryError("Not enough memory to derive key")
        monkeypatch.setattr(kdf_module, "scrypt", exhausted)

        params = ScryptParams(n=2 ** 18, r=8, p=1, dklen=32, salt="00")
        with pytest.raises(UnsupportedKdfParamsError) as exc_info:
            derive_key(b"pw", params)
        assert isinstance(exc_info.value.cause, MemoryError)

    def test_prf_rejected(self):
        params = Pbkdf2Params(c=1, prf="hmac-sha1", dklen=32, salt="00")
        with pytest.raises(UnsupportedKdfParamsError):
            derive_key(b"pw", params)


class TestKdfLimits:

    def test_defaults_accept_common_keystores(self):
        config = SignerConfig()
        check_kdf_limits(ScryptParams(n=2 ** 18, r=8, p=1, dklen=32, salt="00"), config)
        check_kdf_limits(Pbkdf2Params(c=262144, prf="hmac-sha256", dklen=32, salt="00"), config)

    @pytest.mark.parametrize("n,r,p", [(2 ** 21, 8, 1), (2 ** 10, 64, 1), (2 ** 10, 8, 32), (1000, 8, 1)])
    def test_scrypt_rejected(self, n, r, p):
        with pytest.raises(UnsupportedKdfParamsError):
            check_kdf_limits(ScryptParams(n=n, r=r, p=p, dklen=32, salt="00"), SignerConfig())

    def test_pbkdf2_rejected(self):
        params = Pbkdf2Params(c=11_000_000, prf="hmac-sha256", dklen=32, salt="00")
        with pytest.raises(UnsupportedKdfParamsError):
            check_kdf_limits(params, SignerConfig())


class TestCipherRegistry:

    def test_lookup(self):
        assert cipher.get_cipher("aes-128-ctr").iv_size == 16
        assert cipher.get_cipher("AES-128-CBC").name == "aes-128-cbc"

    @pytest.mark.parametrize("name", ["aes-256-ctr", "aes-128-gcm", "", None, 3])
    def test_unknown(self, name):
        with pytest.raises(UnsupportedCipherError):
            cipher.get_cipher(name)

    def test_ctr_keystream(self):
        """AES-128-CTR from NIST SP 800-38A F.5.1."""
        key = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
        iv = bytes.fromhex("f0f1f2f3f4f5f6f7f8f9fafbfcfdfeff")
        ciphertext = bytes.fromhex("874d6191b620e3261bef6864990db6ce")
        plaintext = cipher.decrypt("aes-128-ctr", key, iv, ciphertext)
        assert plaintext.hex() == "6bc1bee22e409f96e93d7e117393172a"


class TestSecretBytes:

    def test_wipe(self):
        secret = SecretBytes(b"\x01" * 32)
        secret.wipe()

        assert secret.wiped
        assert repr(secret) == "SecretBytes(<wiped>)"
        with pytest.raises(ValueError):
            secret.reveal()
        with pytest.raises(ValueError):
            secret.view()

    def test_zeroes_bytearray_source(self):
        source = bytearray(b"\x07" * 16)
        secret = SecretBytes(source)

        assert source == bytearray(16)
        assert secret.reveal() == b"\x07" * 16

    def test_context_manager(self):
        with SecretBytes(b"\x02" * 8) as secret:
            assert bytes(secret.view(2, 4)) == b"\x02\x02"
        assert secret.wiped

    def test_view_is_read_only(self):
        secret = SecretBytes(b"\x03" * 8)
        with pytest.raises(TypeError):
            secret.view()[0] = 0

    def test_not_comparable_or_hashable(self):
        secret = SecretBytes(b"\x04" * 4)
        assert secret != SecretBytes(b"\x04" * 4)
        with pytest.raises(TypeError):
            hash(secret)
        assert "04" not in repr(secret)
