"""
PKCS#7 (S/MIME) and PKCS#12 containers.
"""

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.serialization import pkcs7, pkcs12

from safessl.common.constants import (
    OPENSSL_CIPHER_AES_128_CBC,
    OPENSSL_CIPHER_AES_256_CBC,
    OPENSSL_CIPHER_RC2_40,
    PKCS7_BINARY,
    PKCS7_DETACHED,
    PKCS7_NOATTR,
    PKCS7_NOCERTS,
    PKCS7_NOSMIMECAP,
    PKCS7_TEXT,
)
from safessl.common.models import Pkcs12Bundle
from safessl.common.utils import read_file, to_bytes, write_file
from .errors import reports_errors
from .handles import load_certificate, load_private_key

ENVELOPE_CIPHERS = {
    OPENSSL_CIPHER_AES_128_CBC: algorithms.AES128,
    OPENSSL_CIPHER_AES_256_CBC: algorithms.AES256,
}

SIGN_OPTIONS = {
    PKCS7_TEXT: pkcs7.PKCS7Options.Text,
    PKCS7_BINARY: pkcs7.PKCS7Options.Binary,
    PKCS7_DETACHED: pkcs7.PKCS7Options.DetachedSignature,
    PKCS7_NOCERTS: pkcs7.PKCS7Options.NoCerts,
    PKCS7_NOATTR: pkcs7.PKCS7Options.NoAttributes,
    PKCS7_NOSMIMECAP: pkcs7.PKCS7Options.NoCapabilities,
}

ENCRYPT_OPTIONS = {
    PKCS7_TEXT: pkcs7.PKCS7Options.Text,
    PKCS7_BINARY: pkcs7.PKCS7Options.Binary,
}


def _options(flags: int, table: dict) -> list:
    return [option for bit, option in table.items() if flags & bit]


def _header_block(headers) -> bytes:
    if not headers:
        return b""
    if isinstance(headers, dict):
        lines = [f"{name}: {value}" for name, value in headers.items()]
    else:
        lines = [str(line) for line in headers]
    return ("\n".join(lines) + "\n").encode('utf-8')


def _as_list(value) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _pem(cert: x509.Certificate) -> str:
    return cert.public_bytes(serialization.Encoding.PEM).decode('ascii')


@reports_errors
def pkcs7_encrypt(infile, outfile, recipcerts, headers, flags=0, cipherid=OPENSSL_CIPHER_RC2_40):
    """
    Encrypt the contents of *infile* as S/MIME for each recipient.

    Only the AES-CBC envelope ciphers are available; the RC2/DES ids fail.
    """
    algorithm = ENVELOPE_CIPHERS.get(cipherid)
    if algorithm is None:
        raise ValueError(f"Unsupported cipher id {cipherid} for PKCS#7 encryption")
    builder = (
        pkcs7.PKCS7EnvelopeBuilder()
        .set_data(read_file(infile))
        .set_content_encryption_algorithm(algorithm)
    )
    for cert in _as_list(recipcerts):
        builder = builder.add_recipient(load_certificate(cert).cert)
    body = builder.encrypt(serialization.Encoding.SMIME, _options(flags, ENCRYPT_OPTIONS))
    write_file(outfile, _header_block(headers) + body)
    return True


@reports_errors
def pkcs7_decrypt(infilename, outfilename, recipcert, recipkey=None):
    """Decrypt an S/MIME file; without *recipkey* the key is read from *recipcert*."""
    cert = load_certificate(recipcert).cert
    key = load_private_key(recipcert if recipkey is None else recipkey).key
    plaintext = pkcs7.pkcs7_decrypt_smime(read_file(infilename), cert, key, [])
    write_file(outfilename, plaintext)
    return True


@reports_errors
def pkcs7_read(data):
    """Certificates contained in PEM-encoded PKCS#7 data, as PEM strings."""
    certs = pkcs7.load_pem_pkcs7_certificates(to_bytes(data))
    return [_pem(cert) for cert in certs]


@reports_errors
def pkcs7_sign(infilename, outfilename, signcert, privkey, headers, flags=PKCS7_DETACHED, extracerts=None):
    """
    Sign the contents of *infilename* as S/MIME.

    *extracerts* names a PEM file of further certificates to embed.
    """
    builder = (
        pkcs7.PKCS7SignatureBuilder()
        .set_data(read_file(infilename))
        .add_signer(load_certificate(signcert).cert, load_private_key(privkey).key, hashes.SHA256())
    )
    if extracerts is not None:
        for cert in x509.load_pem_x509_certificates(read_file(extracerts)):
            builder = builder.add_certificate(cert)
    body = builder.sign(serialization.Encoding.SMIME, _options(flags, SIGN_OPTIONS))
    write_file(outfilename, _header_block(headers) + body)
    return True


def _pkcs12(x509cert, priv_key, pass_, args) -> bytes:
    args = args or {}
    cert = load_certificate(x509cert).cert
    key = load_private_key(priv_key).key
    if cert.public_key() != key.public_key():
        raise ValueError("private key does not correspond to cert")
    extracerts = args.get("extracerts")
    cas = [load_certificate(c).cert for c in _as_list(extracerts)] if extracerts else None
    name = args.get("friendly_name")
    if pass_:
        encryption = serialization.BestAvailableEncryption(to_bytes(pass_))
    else:
        encryption = serialization.NoEncryption()
    return pkcs12.serialize_key_and_certificates(
        to_bytes(name) if name else None, key, cert, cas, encryption
    )


@reports_errors
def pkcs12_export_to_file(x509cert, filename, priv_key, pass_, args=None):
    write_file(filename, _pkcs12(x509cert, priv_key, pass_, args))
    return True


@reports_errors
def pkcs12_export(x509cert, priv_key, pass_, args=None):
    return _pkcs12(x509cert, priv_key, pass_, args)


@reports_errors
def pkcs12_read(pkcs12_data, pass_):
    key, cert, additional = pkcs12.load_key_and_certificates(
        to_bytes(pkcs12_data), to_bytes(pass_) if pass_ else None
    )
    pkey = None
    if key is not None:
        pkey = key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode('ascii')
    return Pkcs12Bundle(
        cert=_pem(cert) if cert is not None else None,
        pkey=pkey,
        extracerts=[_pem(c) for c in additional],
    )
