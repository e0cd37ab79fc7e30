"""
Result models using Pydantic.

Operations that OpenSSL bindings expose with by-reference outputs return
one of these instead.
"""

from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)


class EncryptResult(_Result):
    """Output of symmetric encryption."""
    ciphertext: Union[bytes, str] = Field(..., description="Raw ciphertext, or base64 text unless OPENSSL_RAW_DATA")
    tag: Optional[bytes] = Field(None, description="Authentication tag for AEAD methods")


class SealResult(_Result):
    """Output of envelope sealing."""
    sealed_data: bytes = Field(..., description="Data encrypted with the random session key")
    env_keys: List[bytes] = Field(..., description="Session key encrypted for each recipient, in order")
    iv: Optional[bytes] = Field(None, description="Generated IV, present only when requested")

    @property
    def length(self) -> int:
        return len(self.sealed_data)


class RandomBytes(_Result):
    """Output of random byte generation."""
    data: bytes
    crypto_strong: Optional[bool] = Field(None, description="Strength of the source, present only when requested")


class Pkcs12Bundle(_Result):
    """Contents of a parsed PKCS#12 store, PEM encoded."""
    cert: Optional[str] = None
    pkey: Optional[str] = None
    extracerts: List[str] = Field(default_factory=list)
