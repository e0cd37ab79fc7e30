"""
Runtime settings loaded from the environment (and a local .env file).
"""

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError


class Settings(BaseModel):
    log_level: str = Field("WARNING", description="Logging level for the CLI scripts")
    serialize_calls: bool = Field(False, description="Hold a lock around each wrapped call")
    default_key_bits: int = Field(2048, ge=512, description="Key size used by pkey_new when unspecified")
    default_digest: str = Field("sha256", description="Digest used to sign CSRs when unspecified")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return v

    @field_validator("default_digest")
    @classmethod
    def _lower_digest(cls, v: str) -> str:
        return v.lower()


def load_settings() -> Settings:
    """
    Build settings from SAFESSL_* environment variables.

    Raises:
        ConfigurationError: If a variable does not validate
    """
    load_dotenv()
    values = {
        'log_level': os.getenv('SAFESSL_LOG_LEVEL', 'WARNING'),
        'serialize_calls': os.getenv('SAFESSL_SERIALIZE_CALLS', 'false'),
        'default_key_bits': os.getenv('SAFESSL_DEFAULT_KEY_BITS', '2048'),
        'default_digest': os.getenv('SAFESSL_DEFAULT_DIGEST', 'sha256'),
    }
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid safessl settings: {e}") from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
