"""
Safe OpenSSL-style API.

Each method wraps one native primitive. Failures raise
``CryptoOperationError`` carrying the drained diagnostics instead of
returning ``False``. Parameters defaulting to ``ABSENT`` are optional in
the strict sense: leaving them out lets the primitive apply its own
default; any other value, including ``None``, counts as supplied.

Values that OpenSSL bindings usually write into by-reference arguments are
returned instead (see ``safessl.common.models``).
"""

from typing import Optional

from safessl.common.config import get_settings
from safessl.common.constants import (
    ABSENT,
    OPENSSL_ALGO_SHA1,
    OPENSSL_CIPHER_RC2_40,
    OPENSSL_PKCS1_PADDING,
    PKCS7_DETACHED,
)
from safessl.native import asym, cipher, pkcs, pkey, rand, x509
from .wrapper import CallWrapper


class SafeOpenSSL:
    """
    Exception-raising front end over the native primitives.

    Example:
        >>> ssl = SafeOpenSSL()
        >>> ssl.digest("", "sha256")
        'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
    """

    def __init__(self, wrapper: Optional[CallWrapper] = None):
        if wrapper is None:
            wrapper = CallWrapper(serialize=get_settings().serialize_calls)
        self.wrapper = wrapper

    def _call(self, operation, primitive, required=(), optional=()):
        return self.wrapper.call(operation, primitive, required, optional)

    # === Certificate signing requests ===
    def csr_export_to_file(self, csr, outfilename, notext=True):
        """Write *csr* as PEM to *outfilename*. notext=False adds a readable summary."""
        self._call("csr_export_to_file", x509.csr_export_to_file, (csr, outfilename, notext))

    def csr_export(self, csr, notext=True) -> str:
        return self._call("csr_export", x509.csr_export, (csr, notext))

    def csr_get_subject(self, csr, use_shortnames=True) -> dict:
        return self._call("csr_get_subject", x509.csr_get_subject, (csr, use_shortnames))

    def csr_new(self, dn, privkey, configargs=ABSENT, extraattribs=ABSENT):
        """
        Create a CSR for the distinguished name *dn*, signed with *privkey*.

        Args:
            dn: Mapping of short or long attribute names to values
            privkey: Private key the request is signed with
            configargs: Options such as digest_alg
            extraattribs: Extra request attributes (challengePassword, unstructuredName)

        Returns:
            CsrHandle
        """
        return self._call("csr_new", x509.csr_new, (dn, privkey), (configargs, extraattribs))

    # === Symmetric ciphers, digests, KDF ===
    def decrypt(self, data, method, key, options=0, iv=b"", tag=b"", aad=b"") -> bytes:
        return self._call("decrypt", cipher.decrypt, (data, method, key, options, iv, tag, aad))

    def encrypt(self, data, method, key, options=0, iv=b"", aad=b"", tag_length=16):
        """
        Encrypt *data* with the cipher named by *method*.

        Returns:
            EncryptResult with the ciphertext (base64 text unless
            OPENSSL_RAW_DATA is set) and, for AEAD methods, the tag.
        """
        return self._call("encrypt", cipher.encrypt, (data, method, key, options, iv, aad, tag_length))

    def digest(self, data, method, raw_output=False):
        return self._call("digest", cipher.digest, (data, method, raw_output))

    def pbkdf2(self, password, salt, key_length, iterations, digest_algorithm="sha1") -> bytes:
        """
        PBKDF2-HMAC key derivation.

        The default sha1 digest is weak; it is kept for compatibility with
        existing derived keys. Pass digest_algorithm for new uses.
        """
        return self._call("pbkdf2", cipher.pbkdf2, (password, salt, key_length, iterations, digest_algorithm))

    def random_pseudo_bytes(self, length, crypto_strong=ABSENT):
        """
        Generate *length* random bytes.

        Returns:
            RandomBytes; crypto_strong is reported only when supplied.
        """
        return self._call("random_pseudo_bytes", rand.random_pseudo_bytes, (length,), (crypto_strong,))

    # === Asymmetric ===
    def dh_compute_key(self, pub_key, dh_key) -> bytes:
        return self._call("dh_compute_key", asym.dh_compute_key, (pub_key, dh_key))

    def open(self, sealed_data, env_key, priv_key_id, method="RC4", iv=ABSENT) -> bytes:
        """Open data sealed by seal() using the recipient's envelope key."""
        return self._call("open", asym.open, (sealed_data, env_key, priv_key_id, method), (iv,))

    def seal(self, data, pub_key_ids, method="RC4", iv=ABSENT):
        """
        Seal *data* for every key in *pub_key_ids*.

        Supply *iv* (any value, conventionally b"") to receive the generated
        IV; ciphers that need one fail without it.
        """
        return self._call("seal", asym.seal, (data, pub_key_ids, method), (iv,))

    def private_decrypt(self, data, key, padding=OPENSSL_PKCS1_PADDING) -> bytes:
        return self._call("private_decrypt", asym.private_decrypt, (data, key, padding))

    def private_encrypt(self, data, key, padding=OPENSSL_PKCS1_PADDING) -> bytes:
        return self._call("private_encrypt", asym.private_encrypt, (data, key, padding))

    def public_decrypt(self, data, key, padding=OPENSSL_PKCS1_PADDING) -> bytes:
        return self._call("public_decrypt", asym.public_decrypt, (data, key, padding))

    def public_encrypt(self, data, key, padding=OPENSSL_PKCS1_PADDING) -> bytes:
        return self._call("public_encrypt", asym.public_encrypt, (data, key, padding))

    def sign(self, data, priv_key_id, signature_alg=OPENSSL_ALGO_SHA1) -> bytes:
        """Sign *data*. The SHA-1 default is kept for compatibility only."""
        return self._call("sign", asym.sign, (data, priv_key_id, signature_alg))

    # === Keys ===
    def pkey_export_to_file(self, key, outfilename, passphrase=ABSENT, configargs=ABSENT):
        self._call("pkey_export_to_file", pkey.pkey_export_to_file, (key, outfilename), (passphrase, configargs))

    def pkey_export(self, key, passphrase=ABSENT, configargs=ABSENT) -> str:
        return self._call("pkey_export", pkey.pkey_export, (key,), (passphrase, configargs))

    def pkey_get_private(self, key, passphrase=""):
        return self._call("pkey_get_private", pkey.pkey_get_private, (key, passphrase))

    def pkey_get_public(self, certificate):
        return self._call("pkey_get_public", pkey.pkey_get_public, (certificate,))

    def pkey_new(self, configargs=ABSENT):
        return self._call("pkey_new", pkey.pkey_new, (), (configargs,))

    # === PKCS#12 ===
    def pkcs12_export_to_file(self, x509cert, filename, priv_key, pass_, args=ABSENT):
        self._call("pkcs12_export_to_file", pkcs.pkcs12_export_to_file, (x509cert, filename, priv_key, pass_), (args,))

    def pkcs12_export(self, x509cert, priv_key, pass_, args=ABSENT) -> bytes:
        return self._call("pkcs12_export", pkcs.pkcs12_export, (x509cert, priv_key, pass_), (args,))

    def pkcs12_read(self, pkcs12, pass_):
        return self._call("pkcs12_read", pkcs.pkcs12_read, (pkcs12, pass_))

    # === PKCS#7 ===
    def pkcs7_decrypt(self, infilename, outfilename, recipcert, recipkey=ABSENT):
        self._call("pkcs7_decrypt", pkcs.pkcs7_decrypt, (infilename, outfilename, recipcert), (recipkey,))

    def pkcs7_encrypt(self, infile, outfile, recipcerts, headers, flags=0, cipherid=OPENSSL_CIPHER_RC2_40):
        """
        Encrypt *infile* as S/MIME for *recipcerts*.

        The RC2_40 default matches the historical signature but is not
        offered by the underlying library; pass OPENSSL_CIPHER_AES_128_CBC
        or OPENSSL_CIPHER_AES_256_CBC.
        """
        self._call("pkcs7_encrypt", pkcs.pkcs7_encrypt, (infile, outfile, recipcerts, headers, flags, cipherid))

    def pkcs7_read(self, data) -> list:
        return self._call("pkcs7_read", pkcs.pkcs7_read, (data,))

    def pkcs7_sign(self, infilename, outfilename, signcert, privkey, headers, flags=PKCS7_DETACHED,
                   extracerts=ABSENT):
        self._call("pkcs7_sign", pkcs.pkcs7_sign,
                   (infilename, outfilename, signcert, privkey, headers, flags), (extracerts,))

    # === X.509 ===
    def x509_export_to_file(self, x509cert, outfilename, notext=True):
        self._call("x509_export_to_file", x509.x509_export_to_file, (x509cert, outfilename, notext))

    def x509_export(self, x509cert, notext=True) -> str:
        return self._call("x509_export", x509.x509_export, (x509cert, notext))

    def x509_read(self, x509certdata):
        return self._call("x509_read", x509.x509_read, (x509certdata,))
