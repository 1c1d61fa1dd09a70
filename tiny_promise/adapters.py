"""Bridges from the standard library's futures to TinyFuture."""

from concurrent.futures import CancelledError, Executor, Future
import logging
from typing import Any, TypeVar

from .future import TinyFuture

T = TypeVar("T")

logger = logging.getLogger(__name__)


def from_concurrent(future: Future[T], callback_pool: Executor | None = None) -> TinyFuture[T]:
    """Wrap a ``concurrent.futures.Future`` so it can be chained with ``then``.

    The returned TinyFuture settles with the same value or exception once the
    wrapped future completes. A cancelled future fails the TinyFuture with a
    ``CancelledError``.

    Args:
        future: The future to mirror
        callback_pool: Executor for the TinyFuture's listeners, or None to run them inline

    Returns:
        A TinyFuture that follows ``future``
    """
    tiny: TinyFuture[T] = TinyFuture(callback_pool=callback_pool)

    def _copy_outcome(done: Future[Any]) -> None:
        if done.cancelled():
            logger.debug("Wrapped future for %s was cancelled", tiny.uid)
            tiny.set_exception(CancelledError())
            return
        error = done.exception()
        if error is not None:
            tiny.set_exception(error)
        else:
            tiny.set_result(done.result())

    future.add_done_callback(_copy_outcome)
    return tiny
