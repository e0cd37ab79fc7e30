# File: tests/test_x509.py
# Certificate signing requests and certificate import/export.
import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ed25519
from cryptography.x509.oid import AttributeOID

import safessl
from safessl import CertificateHandle, CryptoOperationError, CsrHandle, KeyHandle

DN = {"C": "PK", "O": "Example Org", "CN": "example.test"}


@pytest.fixture(scope="module")
def csr(rsa_key):
    return safessl.csr_new(DN, rsa_key)


def test_csr_new_signs_with_default_digest(csr):
    assert isinstance(csr, CsrHandle)
    assert csr.csr.is_signature_valid
    assert isinstance(csr.csr.signature_hash_algorithm, hashes.SHA256)


def test_csr_new_digest_from_configargs(rsa_key):
    handle = safessl.csr_new(DN, rsa_key, {"digest_alg": "sha384"})
    assert isinstance(handle.csr.signature_hash_algorithm, hashes.SHA384)


def test_csr_new_extra_attributes(rsa_key):
    handle = safessl.csr_new(DN, rsa_key, extraattribs={"challengePassword": "s3cret"})
    attribute = handle.csr.attributes.get_attribute_for_oid(AttributeOID.CHALLENGE_PASSWORD)
    assert attribute.value == b"s3cret"


def test_csr_new_ed25519():
    key = KeyHandle(ed25519.Ed25519PrivateKey.generate())
    handle = safessl.csr_new({"commonName": "ed.test"}, key)
    assert handle.csr.is_signature_valid
    assert handle.csr.signature_hash_algorithm is None


def test_csr_new_unknown_name(rsa_key):
    with pytest.raises(CryptoOperationError) as info:
        safessl.csr_new({"planet": "Mars"}, rsa_key)
    assert info.value.diagnostics == ("csr_new: dn: planet is not a recognized name",)


def test_csr_new_unknown_attribute(rsa_key):
    with pytest.raises(CryptoOperationError):
        safessl.csr_new(DN, rsa_key, None, {"favouriteColour": "blue"})


def test_csr_new_needs_private_key(rsa_key):
    with pytest.raises(CryptoOperationError) as info:
        safessl.csr_new(DN, rsa_key.public())
    assert info.value.operation == "csr_new"


def test_csr_get_subject(csr):
    assert safessl.csr_get_subject(csr) == DN
    assert safessl.csr_get_subject(csr, False) == {
        "countryName": "PK",
        "organizationName": "Example Org",
        "commonName": "example.test",
    }


def test_csr_get_subject_repeated_attribute(rsa_key):
    handle = safessl.csr_new({"CN": "a.test", "OU": ["one", "two"]}, rsa_key)
    assert safessl.csr_get_subject(handle)["OU"] == ["one", "two"]


def test_csr_export(csr):
    pem = safessl.csr_export(csr)
    assert pem.startswith("-----BEGIN CERTIFICATE REQUEST-----")
    text = safessl.csr_export(csr, False)
    assert text.startswith("Certificate Request:")
    assert text.endswith(pem)


def test_csr_export_to_file_and_reload(csr, tmp_path):
    path = tmp_path / "req.pem"
    safessl.csr_export_to_file(csr, str(path))
    assert safessl.csr_get_subject(f"file://{path}") == DN


def test_csr_get_subject_garbage():
    with pytest.raises(CryptoOperationError):
        safessl.csr_get_subject("not a request")


def test_x509_read_and_export(cert_pem):
    handle = safessl.x509_read(cert_pem)
    assert isinstance(handle, CertificateHandle)
    assert safessl.x509_export(handle) == cert_pem
    text = safessl.x509_export(handle, False)
    assert text.startswith("Certificate:")
    assert "CN=alice.test" in text


def test_x509_read_from_file(cert_pem, tmp_path):
    path = tmp_path / "cert.pem"
    path.write_text(cert_pem)
    assert safessl.x509_export(safessl.x509_read(f"file://{path}")) == cert_pem


def test_x509_read_garbage():
    with pytest.raises(CryptoOperationError) as info:
        safessl.x509_read(b"-----BEGIN CERTIFICATE-----\nAAAA\n-----END CERTIFICATE-----\n")
    assert info.value.operation == "x509_read"
    assert info.value.diagnostics


def test_x509_read_missing_file(tmp_path):
    with pytest.raises(CryptoOperationError):
        safessl.x509_read(f"file://{tmp_path / 'absent.pem'}")


def test_x509_export_to_file(certificate, cert_pem, tmp_path):
    path = tmp_path / "out.pem"
    safessl.x509_export_to_file(certificate, str(path))
    assert path.read_text() == cert_pem
