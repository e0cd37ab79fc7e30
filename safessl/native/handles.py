"""
Opaque handles for keys, certificates and signing requests.

Handles wrap the ``cryptography`` objects and are passed by reference into
operations; nothing here inspects or mutates key material. The loaders
accept a handle, a bare ``cryptography`` object, PEM/DER bytes or text, or
a ``file://`` path.
"""

from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dh, dsa, ec, ed448, ed25519, rsa, x448, x25519

from safessl.common.utils import read_source

PRIVATE_KEY_TYPES = (
    rsa.RSAPrivateKey,
    dsa.DSAPrivateKey,
    ec.EllipticCurvePrivateKey,
    dh.DHPrivateKey,
    ed25519.Ed25519PrivateKey,
    ed448.Ed448PrivateKey,
    x25519.X25519PrivateKey,
    x448.X448PrivateKey,
)

PUBLIC_KEY_TYPES = (
    rsa.RSAPublicKey,
    dsa.DSAPublicKey,
    ec.EllipticCurvePublicKey,
    dh.DHPublicKey,
    ed25519.Ed25519PublicKey,
    ed448.Ed448PublicKey,
    x25519.X25519PublicKey,
    x448.X448PublicKey,
)


class KeyHandle:
    """A private or public key."""

    __slots__ = ("_key",)

    def __init__(self, key):
        if not isinstance(key, PRIVATE_KEY_TYPES + PUBLIC_KEY_TYPES):
            raise TypeError(f"unsupported key object: {type(key).__name__}")
        self._key = key

    @property
    def key(self):
        return self._key

    @property
    def is_private(self) -> bool:
        return isinstance(self._key, PRIVATE_KEY_TYPES)

    def public(self) -> "KeyHandle":
        if self.is_private:
            return KeyHandle(self._key.public_key())
        return self

    def __repr__(self) -> str:
        kind = "private" if self.is_private else "public"
        return f"<KeyHandle {kind} {type(self._key).__name__}>"


class CertificateHandle:
    """A parsed X.509 certificate."""

    __slots__ = ("_cert",)

    def __init__(self, cert: x509.Certificate):
        if not isinstance(cert, x509.Certificate):
            raise TypeError("expected an x509.Certificate")
        self._cert = cert

    @property
    def cert(self) -> x509.Certificate:
        return self._cert

    def __repr__(self) -> str:
        return f"<CertificateHandle {self._cert.subject.rfc4514_string()}>"


class CsrHandle:
    """A certificate signing request."""

    __slots__ = ("_csr",)

    def __init__(self, csr: x509.CertificateSigningRequest):
        if not isinstance(csr, x509.CertificateSigningRequest):
            raise TypeError("expected an x509.CertificateSigningRequest")
        self._csr = csr

    @property
    def csr(self) -> x509.CertificateSigningRequest:
        return self._csr

    def __repr__(self) -> str:
        return f"<CsrHandle {self._csr.subject.rfc4514_string()}>"


def _is_pem(data: bytes) -> bool:
    return b"-----BEGIN" in data


def _password(passphrase) -> Optional[bytes]:
    if not passphrase:
        return None
    return passphrase.encode('utf-8') if isinstance(passphrase, str) else bytes(passphrase)


def load_certificate(source) -> CertificateHandle:
    """
    Resolve a certificate source to a handle.

    Raises:
        ValueError: If the data is not a certificate
    """
    if isinstance(source, CertificateHandle):
        return source
    if isinstance(source, x509.Certificate):
        return CertificateHandle(source)
    data = read_source(source)
    if _is_pem(data):
        return CertificateHandle(x509.load_pem_x509_certificate(data))
    return CertificateHandle(x509.load_der_x509_certificate(data))


def load_csr(source) -> CsrHandle:
    if isinstance(source, CsrHandle):
        return source
    if isinstance(source, x509.CertificateSigningRequest):
        return CsrHandle(source)
    data = read_source(source)
    if _is_pem(data):
        return CsrHandle(x509.load_pem_x509_csr(data))
    return CsrHandle(x509.load_der_x509_csr(data))


def load_private_key(source, passphrase=None) -> KeyHandle:
    """
    Resolve a private key source to a handle.

    Args:
        source: Handle, key object, PEM/DER data or file:// path
        passphrase: Passphrase for encrypted PEM/PKCS#8 data

    Raises:
        ValueError: If no private key can be loaded
    """
    if isinstance(source, KeyHandle):
        if not source.is_private:
            raise ValueError("key is not a private key")
        return source
    if isinstance(source, PRIVATE_KEY_TYPES):
        return KeyHandle(source)
    if isinstance(source, PUBLIC_KEY_TYPES):
        raise ValueError("key is not a private key")
    data = read_source(source)
    password = _password(passphrase)
    if _is_pem(data):
        return KeyHandle(serialization.load_pem_private_key(data, password=password))
    return KeyHandle(serialization.load_der_private_key(data, password=password))


def load_public_key(source) -> KeyHandle:
    """
    Resolve a public key from a key, certificate, CSR or encoded data.

    Private keys yield their public half.
    """
    if isinstance(source, KeyHandle):
        return source.public()
    if isinstance(source, CertificateHandle):
        return KeyHandle(source.cert.public_key())
    if isinstance(source, CsrHandle):
        return KeyHandle(source.csr.public_key())
    if isinstance(source, x509.Certificate):
        return KeyHandle(source.public_key())
    if isinstance(source, PRIVATE_KEY_TYPES + PUBLIC_KEY_TYPES):
        return KeyHandle(source).public()
    data = read_source(source)
    if not _is_pem(data):
        return KeyHandle(serialization.load_der_public_key(data))
    if b"CERTIFICATE-----" in data:
        return KeyHandle(x509.load_pem_x509_certificate(data).public_key())
    if b"PRIVATE KEY-----" in data:
        return KeyHandle(serialization.load_pem_private_key(data, password=None)).public()
    return KeyHandle(serialization.load_pem_public_key(data))


def load_key(source) -> KeyHandle:
    """Resolve either a private or a public key, keeping whichever it is."""
    if isinstance(source, KeyHandle):
        return source
    if isinstance(source, PRIVATE_KEY_TYPES):
        return KeyHandle(source)
    if not isinstance(source, (str, bytes, bytearray, memoryview)):
        return load_public_key(source)
    data = read_source(source)
    if b"PRIVATE KEY-----" in data:
        return load_private_key(data)
    return load_public_key(data)
