"""Continuation chaining for settable futures.

``chain`` derives a new future from a source future by applying a success or
error callback to the source's outcome. Exceptions raised by the callbacks
settle the new future as failed, and a callback that returns another future
(anything with a callable ``then``) is waited on instead of being used as the
value.
"""

import logging
from typing import Any, Callable, cast

from .outcome import Failed, guarded_call
from .protocols import Listener, SettableFuture, Thenable, is_thenable

logger = logging.getLogger(__name__)


class _Propagator:
    """Listener pair registered on a source future by a single ``chain`` call."""

    def __init__(
        self,
        continuation: SettableFuture,
        on_success: Listener | None,
        on_error: Listener | None,
    ) -> None:
        self._continuation = continuation
        self._on_success = on_success
        self._on_error = on_error

    def source_succeeded(self, value: Any) -> None:
        if self._on_success is None:
            self._continuation.set_result(value)
        else:
            self._apply(self._on_success, value)

    def source_failed(self, error: Any) -> None:
        if self._on_error is None:
            self._continuation.set_exception(error)
        else:
            self._apply(self._on_error, error)

    def _apply(self, callback: Callable[[Any], Any], payload: Any) -> None:
        outcome = guarded_call(callback, payload)
        if isinstance(outcome, Failed):
            logger.debug("Callback %r raised %r, failing continuation", callback, outcome.error)
            self._continuation.set_exception(outcome.error)
        else:
            self._resolve(outcome.value)

    def _resolve(self, value: Any) -> None:
        """Settle the continuation with ``value``, waiting on it first if it is a thenable."""
        try:
            if is_thenable(value):
                logger.debug("Waiting on returned thenable %r", value)
                cast(Thenable, value).then(self._resolve, self._reject)
                return
        except Exception as e:
            self._reject(e)
            return
        self._continuation.set_result(value)

    def _reject(self, error: Any) -> None:
        self._continuation.set_exception(error)


def chain(
    source: SettableFuture,
    on_success: Listener | None = None,
    on_error: Listener | None = None,
) -> SettableFuture:
    """Register callbacks on ``source`` and return a future for their outcome.

    Each channel is handled independently. A missing callback forwards the
    source's value or error to the returned future unchanged, so failures skip
    over links in a chain that have no error callback.

    Args:
        source: The future to chain from, settled or not
        on_success: Called with the source's value if it succeeds
        on_error: Called with the source's error if it fails

    Returns:
        A new future created by ``source.spawn()`` that settles with the
        callback's return value, the callback's raised exception, or the
        outcome of the thenable the callback returned
    """
    continuation = source.spawn()
    propagator = _Propagator(continuation, on_success, on_error)
    source.add_callback(propagator.source_succeeded)
    source.add_errback(propagator.source_failed)
    return continuation
