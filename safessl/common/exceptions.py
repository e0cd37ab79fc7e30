"""
Custom exceptions for safessl.
"""

from typing import Iterable


class SafeSSLException(Exception):
    """Base exception for safessl errors."""
    pass


class CryptoOperationError(SafeSSLException):
    """
    A wrapped primitive reported failure.

    Carries the name of the failing operation and the diagnostics drained
    from the error queue, oldest first. The diagnostic list may be empty
    when the primitive failed without queueing a message.
    """

    def __init__(self, operation: str, diagnostics: Iterable[str] = ()):
        self.operation = operation
        self.diagnostics = tuple(diagnostics)
        super().__init__(self._format())

    def _format(self) -> str:
        if not self.diagnostics:
            return f"{self.operation} failed"
        return f"{self.operation}: " + "; ".join(self.diagnostics)


class ConfigurationError(SafeSSLException):
    """Environment settings failed validation."""
    pass
