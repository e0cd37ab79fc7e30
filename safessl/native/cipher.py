"""
Symmetric ciphers, message digests and PBKDF2.

Method names follow the OpenSSL spelling (``aes-256-cbc``, ``sha256``) and
are matched case-insensitively. Every primitive returns ``False`` on failure
and leaves the reason in the error queue.
"""

import logging
from typing import Callable, Dict, NamedTuple, Optional

from cryptography.hazmat.decrepit.ciphers import algorithms as legacy
from cryptography.hazmat.decrepit.ciphers import modes as legacy_modes
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from safessl.common.constants import (
    OPENSSL_DONT_ZERO_PAD_KEY,
    OPENSSL_RAW_DATA,
    OPENSSL_ZERO_PADDING,
)
from safessl.common.models import EncryptResult
from safessl.common.utils import b64decode, b64encode, to_bytes
from .errors import push_error, reports_errors

logger = logging.getLogger(__name__)

GCM = "gcm"
CHACHA20_POLY1305 = "chacha20-poly1305"


class CipherSpec(NamedTuple):
    name: str
    key_size: int
    iv_size: int
    block_size: int  # bytes; 0 for stream ciphers and stream modes
    build: Optional[Callable[[bytes, bytes], Cipher]]
    aead: Optional[str] = None

    @property
    def padded(self) -> bool:
        return self.block_size > 0


_MODES = {
    "ecb": (lambda iv: modes.ECB(), False),
    "cbc": (modes.CBC, True),
    "cfb": (legacy_modes.CFB, True),
    "cfb8": (legacy_modes.CFB8, True),
    "ofb": (legacy_modes.OFB, True),
    "ctr": (modes.CTR, True),
}

_PADDED_MODES = ("ecb", "cbc")

CIPHERS: Dict[str, CipherSpec] = {}


def _register_block(prefix: str, algorithm, key_size: int, block_size: int, mode_names):
    for mode_name in mode_names:
        make_mode, needs_iv = _MODES[mode_name]
        name = f"{prefix}-{mode_name}"

        def build(key, iv, algorithm=algorithm, make_mode=make_mode):
            return Cipher(algorithm(key), make_mode(iv))

        CIPHERS[name] = CipherSpec(
            name=name,
            key_size=key_size,
            iv_size=block_size if needs_iv else 0,
            block_size=block_size if mode_name in _PADDED_MODES else 0,
            build=build,
        )


for _bits in (128, 192, 256):
    _register_block(f"aes-{_bits}", algorithms.AES, _bits // 8, 16,
                    ("ecb", "cbc", "cfb", "cfb8", "ofb", "ctr"))
    _register_block(f"camellia-{_bits}", legacy.Camellia, _bits // 8, 16,
                    ("ecb", "cbc", "cfb", "ofb", "ctr"))
    CIPHERS[f"aes-{_bits}-gcm"] = CipherSpec(f"aes-{_bits}-gcm", _bits // 8, 12, 0, None, aead=GCM)

_register_block("sm4", algorithms.SM4, 16, 16, ("ecb", "cbc", "cfb", "ofb", "ctr"))
_register_block("des-ede3", legacy.TripleDES, 24, 8, ("cbc", "cfb", "ofb"))
_register_block("bf", legacy.Blowfish, 16, 8, ("ecb", "cbc", "cfb", "ofb"))
_register_block("cast5", legacy.CAST5, 16, 8, ("ecb", "cbc", "cfb", "ofb"))
_register_block("seed", legacy.SEED, 16, 16, ("ecb", "cbc", "cfb", "ofb"))

CIPHERS["des-ede3"] = CipherSpec("des-ede3", 24, 0, 8, lambda key, iv: Cipher(legacy.TripleDES(key), modes.ECB()))
CIPHERS["rc4"] = CipherSpec("rc4", 16, 0, 0, lambda key, iv: Cipher(legacy.ARC4(key), mode=None))
CIPHERS["chacha20"] = CipherSpec("chacha20", 32, 16, 0, lambda key, iv: Cipher(algorithms.ChaCha20(key, iv), mode=None))
CIPHERS[CHACHA20_POLY1305] = CipherSpec(CHACHA20_POLY1305, 32, 12, 0, None, aead=CHACHA20_POLY1305)


DIGESTS: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "md5": hashes.MD5,
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha512-224": hashes.SHA512_224,
    "sha512-256": hashes.SHA512_256,
    "sha3-224": hashes.SHA3_224,
    "sha3-256": hashes.SHA3_256,
    "sha3-384": hashes.SHA3_384,
    "sha3-512": hashes.SHA3_512,
    "blake2b512": lambda: hashes.BLAKE2b(64),
    "blake2s256": lambda: hashes.BLAKE2s(32),
    "sm3": hashes.SM3,
}


def lookup_cipher(method: str) -> CipherSpec:
    spec = CIPHERS.get(str(method).lower())
    if spec is None:
        raise ValueError(f"Unknown cipher algorithm: {method}")
    return spec


def lookup_digest(method: str) -> hashes.HashAlgorithm:
    factory = DIGESTS.get(str(method).lower())
    if factory is None:
        raise ValueError(f"Unknown digest algorithm: {method}")
    return factory()


def fit_key(key: bytes, spec: CipherSpec, options: int = 0) -> bytes:
    """NUL-pad a short key (unless forbidden) and truncate a long one."""
    if len(key) < spec.key_size:
        if options & OPENSSL_DONT_ZERO_PAD_KEY:
            raise ValueError("Key length cannot be set for the cipher algorithm")
        key = key.ljust(spec.key_size, b"\0")
    return key[:spec.key_size]


def fit_iv(iv: bytes, spec: CipherSpec) -> bytes:
    if spec.iv_size == 0:
        return b""
    if not iv:
        logger.debug("%s: using an empty initialization vector", spec.name)
    elif len(iv) != spec.iv_size:
        logger.debug("%s: IV is %d bytes, expected %d", spec.name, len(iv), spec.iv_size)
    return iv[:spec.iv_size].ljust(spec.iv_size, b"\0")


def block_transform(spec: CipherSpec, key: bytes, iv: bytes, data: bytes,
                    encrypting: bool, pad: bool = True) -> bytes:
    """Run a non-AEAD cipher over data, handling PKCS#7 padding."""
    if spec.aead:
        raise ValueError(f"{spec.name} is an AEAD cipher")
    if spec.padded:
        if pad and encrypting:
            padder = sym_padding.PKCS7(spec.block_size * 8).padder()
            data = padder.update(data) + padder.finalize()
        elif len(data) % spec.block_size:
            raise ValueError("data not multiple of block length")
    cipher = spec.build(key, iv)
    ctx = cipher.encryptor() if encrypting else cipher.decryptor()
    out = ctx.update(data) + ctx.finalize()
    if spec.padded and pad and not encrypting:
        unpadder = sym_padding.PKCS7(spec.block_size * 8).unpadder()
        out = unpadder.update(out) + unpadder.finalize()
    return out


def _check_tag_length(spec: CipherSpec, tag_length: int):
    if spec.aead == GCM and not 4 <= tag_length <= 16:
        raise ValueError("tag_length must be between 4 and 16 for GCM")
    if spec.aead == CHACHA20_POLY1305 and tag_length != 16:
        raise ValueError("tag_length must be 16 for chacha20-poly1305")


def _aead_encrypt(spec, key, iv, data, aad, tag_length):
    if not iv:
        raise ValueError("Setting of IV length for AEAD mode failed")
    _check_tag_length(spec, tag_length)
    if spec.aead == CHACHA20_POLY1305:
        sealed = ChaCha20Poly1305(key).encrypt(iv, data, aad or None)
        return sealed[:-16], sealed[-16:]
    encryptor = Cipher(algorithms.AES(key), modes.GCM(iv)).encryptor()
    if aad:
        encryptor.authenticate_additional_data(aad)
    ct = encryptor.update(data) + encryptor.finalize()
    return ct, encryptor.tag[:tag_length]


def _aead_decrypt(spec, key, iv, data, tag, aad):
    if not iv:
        raise ValueError("Setting of IV length for AEAD mode failed")
    if not tag:
        raise ValueError("Setting tag for AEAD cipher decryption failed")
    if spec.aead == CHACHA20_POLY1305:
        return ChaCha20Poly1305(key).decrypt(iv, data + tag, aad or None)
    decryptor = Cipher(
        algorithms.AES(key),
        modes.GCM(iv, tag, min_tag_length=len(tag)),
    ).decryptor()
    if aad:
        decryptor.authenticate_additional_data(aad)
    return decryptor.update(data) + decryptor.finalize()


@reports_errors
def encrypt(data, method, key, options=0, iv=b"", aad=b"", tag_length=16):
    """
    Encrypt data with a named cipher.

    Returns:
        EncryptResult; ciphertext is base64 text unless OPENSSL_RAW_DATA is
        set, tag is only set for AEAD methods.
    """
    spec = lookup_cipher(method)
    data = to_bytes(data)
    key = fit_key(to_bytes(key), spec, options)
    iv = to_bytes(iv)
    tag = None
    if spec.aead:
        ct, tag = _aead_encrypt(spec, key, iv, data, to_bytes(aad), tag_length)
    else:
        ct = block_transform(spec, key, fit_iv(iv, spec), data, True,
                             pad=not options & OPENSSL_ZERO_PADDING)
    if not options & OPENSSL_RAW_DATA:
        ct = b64encode(ct)
    return EncryptResult(ciphertext=ct, tag=tag)


@reports_errors
def decrypt(data, method, key, options=0, iv=b"", tag=b"", aad=b""):
    """Decrypt data produced by encrypt() with the same method, key and IV."""
    spec = lookup_cipher(method)
    data = to_bytes(data) if options & OPENSSL_RAW_DATA else b64decode(data)
    key = fit_key(to_bytes(key), spec, options)
    iv = to_bytes(iv)
    if spec.aead:
        return _aead_decrypt(spec, key, iv, data, to_bytes(tag), to_bytes(aad))
    return block_transform(spec, key, fit_iv(iv, spec), data, False,
                           pad=not options & OPENSSL_ZERO_PADDING)


@reports_errors
def digest(data, method, raw_output=False):
    h = hashes.Hash(lookup_digest(method))
    h.update(to_bytes(data))
    out = h.finalize()
    return out if raw_output else out.hex()


@reports_errors
def pbkdf2(password, salt, key_length, iterations, digest_algorithm="sha1"):
    """PBKDF2-HMAC. The sha1 default is weak and kept only for compatibility."""
    if key_length <= 0:
        return push_error("pbkdf2: key_length must be greater than 0")
    if iterations <= 0:
        return push_error("pbkdf2: iterations must be greater than 0")
    kdf = PBKDF2HMAC(
        algorithm=lookup_digest(digest_algorithm),
        length=key_length,
        salt=to_bytes(salt),
        iterations=iterations,
    )
    return kdf.derive(to_bytes(password))
