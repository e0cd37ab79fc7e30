"""
Utility functions for safessl.
"""

import base64
from typing import Union

FILE_PREFIX = "file://"

BytesLike = Union[bytes, bytearray, memoryview]


def to_bytes(data: Union[str, BytesLike]) -> bytes:
    """
    Coerce caller data to bytes.

    Args:
        data: Text (UTF-8 encoded) or bytes-like object

    Returns:
        Bytes

    Raises:
        TypeError: If data is neither text nor bytes-like
    """
    if isinstance(data, str):
        return data.encode('utf-8')
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected str or bytes, got {type(data).__name__}")


def b64encode(data: bytes) -> str:
    """
    Base64 encode bytes to string.

    Args:
        data: Bytes to encode

    Returns:
        Base64-encoded string
    """
    return base64.b64encode(data).decode('ascii')


def b64decode(data: Union[str, bytes]) -> bytes:
    """
    Base64 decode string to bytes.

    Args:
        data: Base64-encoded string

    Returns:
        Decoded bytes

    Raises:
        ValueError: If data is not valid base64
    """
    try:
        return base64.b64decode(data, validate=True)
    except ValueError as e:
        raise ValueError("Failed to base64 decode the input") from e


def read_source(source: Union[str, BytesLike]) -> bytes:
    """
    Resolve a key or certificate source to its raw bytes.

    A ``file://`` string is read from disk; any other string or bytes value
    is taken as the encoded object itself.
    """
    if isinstance(source, str) and source.startswith(FILE_PREFIX):
        with open(source[len(FILE_PREFIX):], "rb") as f:
            return f.read()
    return to_bytes(source)


def read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def write_file(path: str, data: Union[str, bytes]) -> None:
    """Write data to exactly *path*; no directories are created."""
    with open(path, "wb") as f:
        f.write(to_bytes(data))
