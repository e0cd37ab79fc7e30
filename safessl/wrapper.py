"""
Error-translating call wrapper.

Every safe operation goes through ``CallWrapper.call``:

1. clear the error source
2. pick the call arity from which optional arguments are present
3. invoke the primitive
4. treat an identical ``False`` as failure
5. on failure, drain the error source into a ``CryptoOperationError``
6. otherwise return the primitive's result untouched
"""

import contextlib
import logging
import threading
from typing import Any, Callable, Optional, Sequence

from safessl.common.constants import ABSENT
from safessl.common.exceptions import CryptoOperationError
from safessl.native.errors import ErrorSource, error_queue, reporting_to

logger = logging.getLogger(__name__)


def select_arity(required: Sequence, optional: Sequence = ()) -> list:
    """
    Build the positional argument list for a primitive.

    Trailing absent optionals are dropped so the primitive applies its own
    defaults. An absent optional followed by a present one is forwarded as
    ``None``.
    """
    last = -1
    for i, value in enumerate(optional):
        if value is not ABSENT:
            last = i
    forwarded = [None if value is ABSENT else value for value in optional[:last + 1]]
    return list(required) + forwarded


class CallWrapper:
    """
    Runs primitives under the clear/call/check/drain protocol.

    Args:
        errors: Error source the primitives report into while a call runs.
            Defaults to the native thread-local queue.
        serialize: Hold a lock around each whole call. Needed only when
            *errors* is shared between threads.
    """

    def __init__(self, errors: Optional[ErrorSource] = None, serialize: bool = False):
        self.errors = errors if errors is not None else error_queue
        self.serialize = serialize
        self._lock = threading.RLock()

    def _guard(self):
        return self._lock if self.serialize else contextlib.nullcontext()

    def call(self, operation: str, primitive: Callable, required: Sequence = (),
             optional: Sequence = ()) -> Any:
        args = select_arity(required, optional)
        with self._guard(), reporting_to(self.errors):
            self.errors.clear()
            logger.debug("%s: calling with %d argument(s)", operation, len(args))
            result = primitive(*args)
            if result is False:
                diagnostics = self.errors.drain()
                logger.warning("%s failed with %d diagnostic(s)", operation, len(diagnostics))
                raise CryptoOperationError(operation, diagnostics)
        return result
