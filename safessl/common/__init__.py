"""
Common definitions for safessl: flags, result models, settings and errors.
"""

from .constants import *
from .exceptions import SafeSSLException, CryptoOperationError, ConfigurationError
from .models import EncryptResult, SealResult, RandomBytes, Pkcs12Bundle
from .config import Settings, get_settings, load_settings

__all__ = [
    'ABSENT',
    'SafeSSLException',
    'CryptoOperationError',
    'ConfigurationError',
    'EncryptResult',
    'SealResult',
    'RandomBytes',
    'Pkcs12Bundle',
    'Settings',
    'get_settings',
    'load_settings',
]
