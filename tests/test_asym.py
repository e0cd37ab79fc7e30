# File: tests/test_asym.py
# RSA encrypt/decrypt, signatures and envelope seal/open.
import hashlib

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding

import safessl
from safessl import (
    OPENSSL_ALGO_SHA256,
    OPENSSL_KEYTYPE_EC,
    OPENSSL_NO_PADDING,
    OPENSSL_PKCS1_OAEP_PADDING,
    CryptoOperationError,
    KeyHandle,
    SealResult,
)

# DER prefix of a PKCS#1 DigestInfo for SHA-256
SHA256_DIGEST_INFO = bytes.fromhex("3031300d060960864801650304020105000420")


@pytest.mark.parametrize("pad", [safessl.OPENSSL_PKCS1_PADDING, OPENSSL_PKCS1_OAEP_PADDING])
def test_public_encrypt_private_decrypt(rsa_key, certificate, pad):
    ct = safessl.public_encrypt(b"session key", certificate, pad)
    assert len(ct) == 256
    assert safessl.private_decrypt(ct, rsa_key, pad) == b"session key"


def test_private_decrypt_with_wrong_key(rsa_key, other_rsa_key):
    ct = safessl.public_encrypt(b"session key", other_rsa_key, OPENSSL_PKCS1_OAEP_PADDING)
    with pytest.raises(CryptoOperationError) as info:
        safessl.private_decrypt(ct, rsa_key, OPENSSL_PKCS1_OAEP_PADDING)
    assert info.value.operation == "private_decrypt"


def test_public_encrypt_unknown_padding(rsa_key):
    with pytest.raises(CryptoOperationError) as info:
        safessl.public_encrypt(b"data", rsa_key, OPENSSL_NO_PADDING)
    assert "padding" in str(info.value)


def test_public_encrypt_needs_rsa():
    key = safessl.pkey_new({"private_key_type": OPENSSL_KEYTYPE_EC, "curve_name": "secp384r1"})
    with pytest.raises(CryptoOperationError) as info:
        safessl.public_encrypt(b"data", key)
    assert "RSA key required" in str(info.value)


def test_private_encrypt_public_decrypt(rsa_key, cert_pem):
    block = SHA256_DIGEST_INFO + hashlib.sha256(b"hello").digest()
    ct = safessl.private_encrypt(block, rsa_key)
    assert safessl.public_decrypt(ct, cert_pem) == block


@pytest.mark.parametrize("name,prefix", [
    ("md5", "3020300c06082a864886f70d020505000410"),
    ("sha1", "3021300906052b0e03021a05000414"),
    ("sha512", "3051300d060960864801650304020305000440"),
])
def test_private_encrypt_other_digest_infos(rsa_key, name, prefix):
    block = bytes.fromhex(prefix) + hashlib.new(name, b"payload").digest()
    assert safessl.public_decrypt(safessl.private_encrypt(block, rsa_key), rsa_key) == block


@pytest.mark.parametrize("data", [
    b"hello",
    SHA256_DIGEST_INFO + b"\x00" * 31,
    SHA256_DIGEST_INFO + b"\x00" * 33,
])
def test_private_encrypt_rejects_arbitrary_data(rsa_key, data):
    with pytest.raises(CryptoOperationError) as info:
        safessl.private_encrypt(data, rsa_key)
    assert "unsupported input" in str(info.value)


def test_private_encrypt_matches_pkcs1_signature(rsa_key):
    data = b"signed payload"
    block = SHA256_DIGEST_INFO + hashlib.sha256(data).digest()
    assert safessl.private_encrypt(block, rsa_key) == safessl.sign(data, rsa_key, OPENSSL_ALGO_SHA256)


def test_private_encrypt_data_too_large(rsa_key):
    with pytest.raises(CryptoOperationError) as info:
        safessl.private_encrypt(b"x" * 250, rsa_key)
    assert "too large" in str(info.value)


def test_public_decrypt_rejects_garbage(rsa_key):
    with pytest.raises(CryptoOperationError):
        safessl.public_decrypt(b"\x01" * 256, rsa_key)


# --- signatures ---

def test_sign_rsa_default_sha1(rsa_key):
    signature = safessl.sign(b"message", rsa_key)
    rsa_key.key.public_key().verify(signature, b"message", padding.PKCS1v15(), hashes.SHA1())


def test_sign_empty_data(rsa_key):
    signature = safessl.sign(b"", rsa_key, OPENSSL_ALGO_SHA256)
    rsa_key.key.public_key().verify(signature, b"", padding.PKCS1v15(), hashes.SHA256())


def test_sign_ecdsa():
    key = safessl.pkey_new({"private_key_type": OPENSSL_KEYTYPE_EC, "curve_name": "prime256v1"})
    signature = safessl.sign("message", key, OPENSSL_ALGO_SHA256)
    key.key.public_key().verify(signature, b"message", ec.ECDSA(hashes.SHA256()))


def test_sign_by_digest_name(rsa_key):
    signature = safessl.sign(b"message", rsa_key, "sha512")
    rsa_key.key.public_key().verify(signature, b"message", padding.PKCS1v15(), hashes.SHA512())


def test_sign_ed25519_ignores_digest():
    key = KeyHandle(ed25519.Ed25519PrivateKey.generate())
    signature = safessl.sign(b"message", key)
    key.key.public_key().verify(signature, b"message")


def test_sign_with_public_key_fails(rsa_key):
    with pytest.raises(CryptoOperationError) as info:
        safessl.sign(b"message", rsa_key.public())
    assert info.value.diagnostics == ("sign: key is not a private key",)


def test_sign_unknown_algorithm(rsa_key):
    with pytest.raises(CryptoOperationError) as info:
        safessl.sign(b"message", rsa_key, 999)
    assert "Unknown digest algorithm" in str(info.value)


# --- seal / open ---

def test_seal_and_open_for_two_recipients(rsa_key, other_rsa_key, certificate):
    result = safessl.seal(b"for your eyes only", [certificate, other_rsa_key], "aes-256-cbc", b"")
    assert isinstance(result, SealResult)
    assert len(result.env_keys) == 2
    assert len(result.iv) == 16
    assert result.length == len(result.sealed_data)
    for env_key, priv in zip(result.env_keys, (rsa_key, other_rsa_key)):
        opened = safessl.open(result.sealed_data, env_key, priv, "aes-256-cbc", result.iv)
        assert opened == b"for your eyes only"


def test_seal_without_iv_for_ecb(rsa_key):
    result = safessl.seal(b"data", [rsa_key], "aes-128-ecb")
    assert result.iv is None
    assert safessl.open(result.sealed_data, result.env_keys[0], rsa_key, "aes-128-ecb") == b"data"


def test_seal_requires_iv_for_cbc(rsa_key):
    with pytest.raises(CryptoOperationError) as info:
        safessl.seal(b"data", [rsa_key], "aes-256-cbc")
    assert "requires an IV" in str(info.value)


def test_seal_rejects_aead(rsa_key):
    with pytest.raises(CryptoOperationError):
        safessl.seal(b"data", [rsa_key], "aes-256-gcm", b"")


def test_seal_needs_recipients():
    with pytest.raises(CryptoOperationError) as info:
        safessl.seal(b"data", [], "aes-128-ecb")
    assert "non-empty" in str(info.value)


def test_open_with_short_iv(rsa_key):
    result = safessl.seal(b"data", [rsa_key], "aes-256-cbc", b"")
    with pytest.raises(CryptoOperationError) as info:
        safessl.open(result.sealed_data, result.env_keys[0], rsa_key, "aes-256-cbc", result.iv[:8])
    assert info.value.operation == "open"
    assert "IV must be 16 bytes" in str(info.value)


def test_open_needs_private_key(rsa_key):
    result = safessl.seal(b"data", [rsa_key], "aes-128-ecb")
    with pytest.raises(CryptoOperationError):
        safessl.open(result.sealed_data, result.env_keys[0], rsa_key.public(), "aes-128-ecb")
