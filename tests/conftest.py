"""
Test bootstrap:
- Make src/ and tests/ importable when the package is not installed
- Shared keystores, keys and configurations
"""
import sys
import pathlib

import pytest

ROOT = pathlib.Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
TESTS = ROOT / "tests"

for path in (SRC, TESTS):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from keystore_signer.config import SignerConfig  # noqa: E402
from helpers import make_keystore, vectors  # noqa: E402

TEST_PASSWORD = "correct horse battery staple"


@pytest.fixture
def config():
    """Default limits, no default chain id."""
    return SignerConfig()


@pytest.fixture
def pbkdf2_keystore():
    """Published PBKDF2 keystore (262144 iterations)."""
    return dict(vectors.PBKDF2_KEYSTORE)


@pytest.fixture
def scrypt_keystore():
    """Published scrypt keystore (n=262144, p=8)."""
    return dict(vectors.SCRYPT_KEYSTORE)


@pytest.fixture
def fast_keystore():
    """Cheap PBKDF2 keystore holding the published private key."""
    return make_keystore(vectors.KEYSTORE_PRIVATE_KEY, TEST_PASSWORD)


@pytest.fixture
def fast_password():
    return TEST_PASSWORD


@pytest.fixture
def eip155_key():
    """Private key from the EIP-155 example."""
    return vectors.EIP155_PRIVATE_KEY


@pytest.fixture
def eip155_tx():
    """Transaction fields from the EIP-155 example."""
    return dict(vectors.EIP155_TX)
