"""
Asymmetric operations: RSA encrypt/decrypt, signing, DH key agreement and
envelope seal/open.
"""

import secrets

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dh, dsa, ec, ed448, ed25519, rsa
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric import utils as asym_utils

from safessl.common.constants import (
    ABSENT,
    OPENSSL_ALGO_MD4,
    OPENSSL_ALGO_MD5,
    OPENSSL_ALGO_RMD160,
    OPENSSL_ALGO_SHA1,
    OPENSSL_ALGO_SHA224,
    OPENSSL_ALGO_SHA256,
    OPENSSL_ALGO_SHA384,
    OPENSSL_ALGO_SHA512,
    OPENSSL_PKCS1_OAEP_PADDING,
    OPENSSL_PKCS1_PADDING,
)
from safessl.common.models import SealResult
from safessl.common.utils import to_bytes
from .cipher import block_transform, fit_iv, lookup_cipher, lookup_digest
from .errors import reports_errors
from .handles import load_key, load_private_key, load_public_key

SIGNATURE_ALGORITHMS = {
    OPENSSL_ALGO_SHA1: "sha1",
    OPENSSL_ALGO_MD5: "md5",
    OPENSSL_ALGO_MD4: "md4",
    OPENSSL_ALGO_SHA224: "sha224",
    OPENSSL_ALGO_SHA256: "sha256",
    OPENSSL_ALGO_SHA384: "sha384",
    OPENSSL_ALGO_SHA512: "sha512",
    OPENSSL_ALGO_RMD160: "ripemd160",
}

# DER DigestInfo header for each digest, followed by the raw digest bytes.
DIGEST_INFO_PREFIXES = (
    (bytes.fromhex("3020300c06082a864886f70d020505000410"), hashes.MD5()),
    (bytes.fromhex("3021300906052b0e03021a05000414"), hashes.SHA1()),
    (bytes.fromhex("302d300d06096086480165030402040500041c"), hashes.SHA224()),
    (bytes.fromhex("3031300d060960864801650304020105000420"), hashes.SHA256()),
    (bytes.fromhex("3041300d060960864801650304020205000430"), hashes.SHA384()),
    (bytes.fromhex("3051300d060960864801650304020305000440"), hashes.SHA512()),
)


def _encryption_padding(pad: int):
    if pad == OPENSSL_PKCS1_PADDING:
        return asym_padding.PKCS1v15()
    if pad == OPENSSL_PKCS1_OAEP_PADDING:
        return asym_padding.OAEP(mgf=asym_padding.MGF1(hashes.SHA1()), algorithm=hashes.SHA1(), label=None)
    raise ValueError("unknown padding type")


def _require_rsa(key, private: bool):
    expected = rsa.RSAPrivateKey if private else rsa.RSAPublicKey
    if not isinstance(key, expected):
        raise TypeError("key type not supported in this context; RSA key required")
    return key


def _signature_hash(signature_alg) -> hashes.HashAlgorithm:
    name = SIGNATURE_ALGORITHMS.get(signature_alg, signature_alg)
    return lookup_digest(name)


@reports_errors
def public_encrypt(data, key, padding=OPENSSL_PKCS1_PADDING):
    pub = _require_rsa(load_public_key(key).key, private=False)
    return pub.encrypt(to_bytes(data), _encryption_padding(padding))


@reports_errors
def private_decrypt(data, key, padding=OPENSSL_PKCS1_PADDING):
    priv = _require_rsa(load_private_key(key).key, private=True)
    return priv.decrypt(to_bytes(data), _encryption_padding(padding))


@reports_errors
def private_encrypt(data, key, padding=OPENSSL_PKCS1_PADDING):
    """
    RSA private-key operation over PKCS#1 v1.5 type-1 padding.

    The library performs this step only as part of signing, so *data* must
    be a DER DigestInfo for md5, sha1, sha224, sha256, sha384 or sha512.
    The output is then the same block a raw private encryption would give.
    Any other input fails.
    """
    if padding != OPENSSL_PKCS1_PADDING:
        raise ValueError("unknown padding type")
    priv = _require_rsa(load_private_key(key).key, private=True)
    data = to_bytes(data)
    if len(data) > (priv.key_size + 7) // 8 - 11:
        raise ValueError("data too large for key size")
    for prefix, algorithm in DIGEST_INFO_PREFIXES:
        if data.startswith(prefix) and len(data) == len(prefix) + algorithm.digest_size:
            return priv.sign(data[len(prefix):], asym_padding.PKCS1v15(), asym_utils.Prehashed(algorithm))
    raise ValueError("unsupported input; only a DER DigestInfo for md5, sha1 or sha2 can be encrypted")


@reports_errors
def public_decrypt(data, key, padding=OPENSSL_PKCS1_PADDING):
    if padding != OPENSSL_PKCS1_PADDING:
        raise ValueError("unknown padding type")
    pub = _require_rsa(load_public_key(key).key, private=False)
    return pub.recover_data_from_signature(to_bytes(data), asym_padding.PKCS1v15(), None)


@reports_errors
def sign(data, priv_key_id, signature_alg=OPENSSL_ALGO_SHA1):
    """
    Sign data. RSA uses PKCS#1 v1.5, EC uses ECDSA; Ed25519/Ed448 ignore
    the digest.
    """
    key = load_private_key(priv_key_id).key
    data = to_bytes(data)
    if isinstance(key, (ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey)):
        return key.sign(data)
    algorithm = _signature_hash(signature_alg)
    if isinstance(key, rsa.RSAPrivateKey):
        return key.sign(data, asym_padding.PKCS1v15(), algorithm)
    if isinstance(key, ec.EllipticCurvePrivateKey):
        return key.sign(data, ec.ECDSA(algorithm))
    if isinstance(key, dsa.DSAPrivateKey):
        return key.sign(data, algorithm)
    raise TypeError(f"key type {type(key).__name__} cannot sign")


@reports_errors
def dh_compute_key(pub_key, dh_key):
    """Shared secret from the peer's public value (big-endian) and our DH key."""
    key = load_key(dh_key).key
    if not isinstance(key, dh.DHPrivateKey):
        raise TypeError("key type not supported in this context; DH private key required")
    y = int.from_bytes(to_bytes(pub_key), "big")
    numbers = key.parameters().parameter_numbers()
    peer = dh.DHPublicNumbers(y, numbers).public_key()
    # Leading zero bytes are not part of the secret.
    return key.exchange(peer).lstrip(b"\x00")


@reports_errors
def seal(data, pub_key_ids, method="RC4", iv=ABSENT):
    """
    Envelope-encrypt data for each recipient.

    A random session key encrypts the data and is itself encrypted with
    each recipient's RSA public key. The generated IV is returned only when
    the caller passed *iv*.
    """
    spec = lookup_cipher(method)
    if spec.aead:
        raise ValueError(f"{spec.name} is not supported for sealing")
    if isinstance(pub_key_ids, (str, bytes)) or not hasattr(pub_key_ids, "__iter__"):
        pub_key_ids = [pub_key_ids]
    recipients = [
        _require_rsa(load_public_key(k).key, private=False) for k in pub_key_ids
    ]
    if not recipients:
        raise ValueError("pub_key_ids must be a non-empty list")
    if spec.iv_size and iv is ABSENT:
        raise ValueError("Cipher algorithm requires an IV to be passed")

    session_key = secrets.token_bytes(spec.key_size)
    generated_iv = secrets.token_bytes(spec.iv_size) if spec.iv_size else b""
    sealed = block_transform(spec, session_key, generated_iv, to_bytes(data), True)
    env_keys = [r.encrypt(session_key, asym_padding.PKCS1v15()) for r in recipients]
    return SealResult(
        sealed_data=sealed,
        env_keys=env_keys,
        iv=None if iv is ABSENT else generated_iv,
    )


@reports_errors
def open(sealed_data, env_key, priv_key_id, method="RC4", iv=ABSENT):
    spec = lookup_cipher(method)
    if spec.aead:
        raise ValueError(f"{spec.name} is not supported for sealing")
    iv = b"" if iv is ABSENT or iv is None else to_bytes(iv)
    if spec.iv_size and len(iv) != spec.iv_size:
        raise ValueError(f"IV must be {spec.iv_size} bytes for {spec.name}")
    priv = _require_rsa(load_private_key(priv_key_id).key, private=True)
    session_key = priv.decrypt(to_bytes(env_key), asym_padding.PKCS1v15())
    if len(session_key) != spec.key_size:
        raise ValueError("envelope key does not match cipher key length")
    return block_transform(spec, session_key, fit_iv(iv, spec), to_bytes(sealed_data), False)
