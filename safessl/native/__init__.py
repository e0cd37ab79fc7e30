"""
Native primitives for safessl.

Each function delegates to the ``cryptography`` package and follows the
sentinel convention: it returns its result on success, or ``False`` after
pushing diagnostics into the active error source (``errors.error_queue``
unless a call wrapper bound its own). Nothing in this package
raises on a failed operation.

- cipher: symmetric encrypt/decrypt, digests, PBKDF2
- rand: random byte generation
- pkey: key generation, import and export
- asym: RSA encrypt/decrypt, signing, DH, envelope seal/open
- x509: certificates and signing requests
- pkcs: PKCS#7 and PKCS#12
"""

from . import asym, cipher, pkcs, pkey, rand, x509
from .errors import (
    ErrorSource,
    ThreadLocalErrorQueue,
    current_errors,
    error_queue,
    push_error,
    reporting_to,
    reports_errors,
)
from .handles import CertificateHandle, CsrHandle, KeyHandle

__all__ = [
    'asym',
    'cipher',
    'pkcs',
    'pkey',
    'rand',
    'x509',
    'ErrorSource',
    'ThreadLocalErrorQueue',
    'current_errors',
    'error_queue',
    'push_error',
    'reporting_to',
    'reports_errors',
    'KeyHandle',
    'CertificateHandle',
    'CsrHandle',
]
