"""
Key generation, import and export.
"""

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dh, dsa, ec, rsa

from safessl.common.config import get_settings
from safessl.common.constants import (
    OPENSSL_KEYTYPE_DH,
    OPENSSL_KEYTYPE_DSA,
    OPENSSL_KEYTYPE_EC,
    OPENSSL_KEYTYPE_RSA,
)
from safessl.common.utils import to_bytes, write_file
from .errors import reports_errors
from .handles import KeyHandle, load_private_key, load_public_key


# RFC 3526 - 2048-bit MODP Group (Group 14)
DH_PRIME_2048 = int(
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3D"
    "C2007CB8A163BF0598DA48361C55D39A69163FA8FD24CF5F"
    "83655D23DCA3AD961C62F356208552BB9ED529077096966D"
    "670C354E4ABC9804F1746C08CA18217C32905E462E36CE3B"
    "E39E772C180E86039B2783A2EC07A28FB5C55DF06F4C52C9"
    "DE2BCBF6955817183995497CEA956AE515D2261898FA0510"
    "15728E5A8AACAA68FFFFFFFFFFFFFFFF", 16
)

DH_GENERATOR = 2

CURVES = {
    "prime256v1": ec.SECP256R1,
    "secp256r1": ec.SECP256R1,
    "secp384r1": ec.SECP384R1,
    "secp521r1": ec.SECP521R1,
    "secp256k1": ec.SECP256K1,
    "secp224r1": ec.SECP224R1,
    "brainpoolp256r1": ec.BrainpoolP256R1,
    "brainpoolp384r1": ec.BrainpoolP384R1,
    "brainpoolp512r1": ec.BrainpoolP512R1,
}


def _as_int(value) -> int:
    if isinstance(value, int):
        return value
    return int.from_bytes(to_bytes(value), byteorder='big')


def _dh_parameters(configargs: dict) -> dh.DHParameters:
    custom = configargs.get("dh")
    if custom:
        if custom.get("p") is None:
            raise ValueError("Missing configuration value: 'dh' needs 'p'")
        p = _as_int(custom["p"])
        g = _as_int(custom.get("g", DH_GENERATOR))
    else:
        p, g = DH_PRIME_2048, DH_GENERATOR
    return dh.DHParameterNumbers(p, g).parameters()


@reports_errors
def pkey_new(configargs=None):
    """
    Generate a new private key.

    Recognised configargs keys: private_key_type (OPENSSL_KEYTYPE_*),
    private_key_bits, curve_name, and dh (a mapping with p and g).
    """
    configargs = configargs or {}
    key_type = configargs.get("private_key_type", OPENSSL_KEYTYPE_RSA)
    bits = int(configargs.get("private_key_bits") or get_settings().default_key_bits)

    if key_type == OPENSSL_KEYTYPE_RSA:
        key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
    elif key_type == OPENSSL_KEYTYPE_DSA:
        key = dsa.generate_private_key(key_size=bits)
    elif key_type == OPENSSL_KEYTYPE_DH:
        key = _dh_parameters(configargs).generate_private_key()
    elif key_type == OPENSSL_KEYTYPE_EC:
        curve_name = configargs.get("curve_name")
        if not curve_name:
            raise ValueError("Missing configuration value: 'curve_name' not set")
        curve = CURVES.get(str(curve_name).lower())
        if curve is None:
            raise ValueError(f"Unknown elliptic curve (short) name {curve_name}")
        key = ec.generate_private_key(curve())
    else:
        raise ValueError(f"Unsupported private key type: {key_type}")
    return KeyHandle(key)


def _export(key, passphrase):
    handle = load_private_key(key)
    if passphrase:
        encryption = serialization.BestAvailableEncryption(to_bytes(passphrase))
    else:
        encryption = serialization.NoEncryption()
    return handle.key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=encryption,
    )


@reports_errors
def pkey_export(key, passphrase=None, configargs=None):
    """Export a private key as PKCS#8 PEM, encrypted when a passphrase is given."""
    return _export(key, passphrase).decode('ascii')


@reports_errors
def pkey_export_to_file(key, outfilename, passphrase=None, configargs=None):
    write_file(outfilename, _export(key, passphrase))
    return True


@reports_errors
def pkey_get_private(key, passphrase=""):
    return load_private_key(key, passphrase)


@reports_errors
def pkey_get_public(certificate):
    return load_public_key(certificate)
