"""
safessl - exception-raising wrappers over OpenSSL-style crypto primitives.

The primitives in ``safessl.native`` signal failure by returning ``False``
and leaving diagnostics in a per-thread error queue. The functions exported
here raise ``CryptoOperationError`` instead.

Example:
    >>> import safessl
    >>> key = safessl.pkey_new({"private_key_bits": 2048})
    >>> pem = safessl.pkey_export(key)
"""

from .common.constants import *
from .common.config import Settings, get_settings
from .common.exceptions import CryptoOperationError, ConfigurationError, SafeSSLException
from .common.models import EncryptResult, Pkcs12Bundle, RandomBytes, SealResult
from .native.handles import CertificateHandle, CsrHandle, KeyHandle
from .openssl import SafeOpenSSL
from .wrapper import CallWrapper, select_arity

__version__ = "1.0.0"

_default = SafeOpenSSL()

# Module-level surface bound to the default instance
csr_export_to_file = _default.csr_export_to_file
csr_export = _default.csr_export
csr_get_subject = _default.csr_get_subject
csr_new = _default.csr_new
decrypt = _default.decrypt
dh_compute_key = _default.dh_compute_key
digest = _default.digest
encrypt = _default.encrypt
open = _default.open
pbkdf2 = _default.pbkdf2
pkcs12_export_to_file = _default.pkcs12_export_to_file
pkcs12_export = _default.pkcs12_export
pkcs12_read = _default.pkcs12_read
pkcs7_decrypt = _default.pkcs7_decrypt
pkcs7_encrypt = _default.pkcs7_encrypt
pkcs7_read = _default.pkcs7_read
pkcs7_sign = _default.pkcs7_sign
pkey_export_to_file = _default.pkey_export_to_file
pkey_export = _default.pkey_export
pkey_get_private = _default.pkey_get_private
pkey_get_public = _default.pkey_get_public
pkey_new = _default.pkey_new
private_decrypt = _default.private_decrypt
private_encrypt = _default.private_encrypt
public_decrypt = _default.public_decrypt
public_encrypt = _default.public_encrypt
random_pseudo_bytes = _default.random_pseudo_bytes
seal = _default.seal
sign = _default.sign
x509_export_to_file = _default.x509_export_to_file
x509_export = _default.x509_export
x509_read = _default.x509_read
