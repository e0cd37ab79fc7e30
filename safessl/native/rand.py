"""
Random byte generation from the OS CSPRNG.
"""

import secrets

from safessl.common.constants import ABSENT
from safessl.common.models import RandomBytes
from .errors import push_error, reports_errors


@reports_errors
def random_pseudo_bytes(length, crypto_strong=ABSENT):
    """
    Return *length* random bytes.

    The source is always cryptographically strong; the flag is only
    reported back when the caller passed *crypto_strong*.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError("length must be int")
    if length < 1:
        return push_error("random_pseudo_bytes: Length must be greater than 0")
    data = secrets.token_bytes(length)
    strong = True
    return RandomBytes(
        data=data,
        crypto_strong=None if crypto_strong is ABSENT else strong,
    )
