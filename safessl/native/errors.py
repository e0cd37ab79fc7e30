"""
Error queue for native primitives.

Native primitives never raise. They record what went wrong in the active
error source (this queue unless a call wrapper bound another) and return
``False``; the call wrapper clears that source before each call and drains
it when the sentinel comes back.
"""

import contextlib
import contextvars
import functools
import logging
import threading
from collections import deque
from typing import List, Optional, Protocol

from cryptography.exceptions import (
    InvalidKey,
    InvalidSignature,
    InvalidTag,
    UnsupportedAlgorithm,
)

logger = logging.getLogger(__name__)

# OpenSSL keeps at most this many entries per thread.
QUEUE_DEPTH = 16

LIBRARY_ERRORS = (
    ValueError,
    TypeError,
    OSError,
    UnsupportedAlgorithm,
    InvalidTag,
    InvalidSignature,
    InvalidKey,
)


class ErrorSource(Protocol):
    """Where primitives report failures and the call wrapper reads them back."""

    def push(self, message: str) -> None: ...

    def clear(self) -> None: ...

    def drain(self) -> List[str]: ...


class ThreadLocalErrorQueue:
    """
    Bounded per-thread queue of diagnostic strings.

    Each thread sees only the entries it pushed, so callers in different
    threads never observe one another's failures.
    """

    def __init__(self, depth: int = QUEUE_DEPTH):
        self._depth = depth
        self._local = threading.local()

    def _entries(self) -> deque:
        entries = getattr(self._local, "entries", None)
        if entries is None:
            entries = deque(maxlen=self._depth)
            self._local.entries = entries
        return entries

    def push(self, message: str) -> None:
        self._entries().append(message)

    def peek(self) -> Optional[str]:
        """Most recent entry, left in place."""
        entries = self._entries()
        return entries[-1] if entries else None

    def clear(self) -> None:
        self._entries().clear()

    def drain(self) -> List[str]:
        """Remove and return all entries, oldest first."""
        entries = self._entries()
        drained = list(entries)
        entries.clear()
        return drained

    def __len__(self) -> int:
        return len(self._entries())


error_queue = ThreadLocalErrorQueue()

_active_source: contextvars.ContextVar = contextvars.ContextVar("safessl_error_source", default=None)


def current_errors() -> ErrorSource:
    """The source primitives report into: the one bound by the running call, else the queue."""
    source = _active_source.get()
    return source if source is not None else error_queue


@contextlib.contextmanager
def reporting_to(source: ErrorSource):
    """Route ``push_error`` into *source* for the duration of the block."""
    token = _active_source.set(source)
    try:
        yield source
    finally:
        _active_source.reset(token)


def push_error(message: str) -> bool:
    """Queue a diagnostic and return the failure sentinel."""
    current_errors().push(message)
    return False


def describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def reports_errors(func):
    """
    Convert library exceptions raised by a primitive into a queued
    diagnostic and a ``False`` return.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except LIBRARY_ERRORS as e:
            logger.debug("%s raised %s", func.__name__, type(e).__name__)
            return push_error(f"{func.__name__}: {describe(e)}")
    return wrapper
