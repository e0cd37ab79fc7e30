# File: tests/conftest.py
# Shared keys, certificates and error sources for the safessl tests.
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from hypothesis import settings

from safessl import KeyHandle, CertificateHandle
from safessl.common.config import get_settings
from safessl.native.errors import error_queue

settings.register_profile(
    "fast",
    max_examples=12,   # reduce randomized cases
    deadline=None,     # key and cipher setup dominate timing
    derandomize=True,  # stable runs
)
settings.load_profile("fast")


class FakeErrorSource:
    """In-memory error source that records how often it was cleared."""

    def __init__(self, entries=()):
        self.entries = list(entries)
        self.clears = 0

    def push(self, message):
        self.entries.append(message)

    def clear(self):
        self.clears += 1
        self.entries.clear()

    def drain(self):
        drained, self.entries = self.entries, []
        return drained


def _self_signed(key, common_name):
    name = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "PK"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "safessl tests"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    now = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )


def _pem_key(key) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode('ascii')


@pytest.fixture(scope="session")
def rsa_key():
    return KeyHandle(rsa.generate_private_key(public_exponent=65537, key_size=2048))


@pytest.fixture(scope="session")
def other_rsa_key():
    return KeyHandle(rsa.generate_private_key(public_exponent=65537, key_size=2048))


@pytest.fixture(scope="session")
def certificate(rsa_key):
    return CertificateHandle(_self_signed(rsa_key.key, "alice.test"))


@pytest.fixture(scope="session")
def other_certificate(other_rsa_key):
    return CertificateHandle(_self_signed(other_rsa_key.key, "bob.test"))


@pytest.fixture(scope="session")
def key_pem(rsa_key):
    return _pem_key(rsa_key.key)


@pytest.fixture(scope="session")
def cert_pem(certificate):
    return certificate.cert.public_bytes(serialization.Encoding.PEM).decode('ascii')


@pytest.fixture
def fake_errors():
    return FakeErrorSource()


@pytest.fixture(autouse=True)
def empty_error_queue():
    error_queue.clear()
    yield
    error_queue.clear()


@pytest.fixture
def fresh_settings():
    """Drop cached settings so environment changes take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
