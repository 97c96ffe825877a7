"""Test basic imports from the keystore_signer package."""


def test_main_import():
    """Test that the main package imports successfully."""
    import keystore_signer
    assert keystore_signer.__version__ == "0.1.0"
    assert hasattr(keystore_signer, 'unlock_wallet')
    assert hasattr(keystore_signer, 'sign_transaction')


def test_public_names_resolve():
    """Every name in __all__ is importable."""
    import keystore_signer
    for name in keystore_signer.__all__:
        assert hasattr(keystore_signer, name), name


def test_crypto_import():
    """Test crypto module imports."""
    import keystore_signer.crypto as crypto
    assert hasattr(crypto, 'Secp256k1PrivateKey')
    assert hasattr(crypto, 'SecretBytes')


def test_keys_import():
    """Test keys module imports."""
    import keystore_signer.keys as keys
    assert hasattr(keys, 'KeystoreDecryptor')
    assert hasattr(keys, 'SeedHandle')


def test_signers_import():
    """Test signers module imports."""
    import keystore_signer.signers as signers
    assert hasattr(signers, 'TransactionSigner')


def test_tx_import():
    """Test transaction module imports."""
    import keystore_signer.tx as tx
    assert hasattr(tx, 'SignedTransaction')
