"""Provides a lightweight settable Future with chainable continuations.

This module implements a Future class that represents a value that will be available
at some point in the future. It settles exactly once, either with a value or with an
error, and notifies separate success and error listeners. ``then`` builds new futures
from the outcome of an existing one.
"""

from collections import deque
from concurrent.futures import Executor
import logging
import threading
from typing import Any, Callable, Generic, TypeVar, cast
import uuid

from .chain import chain
from .outcome import Failed, Outcome, Succeeded

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RejectedError(Exception):
    """Raised by ``TinyFuture.result`` when a future failed with a non-exception payload."""

    def __init__(self, reason: Any) -> None:
        super().__init__(f"Future failed with {reason!r}")
        self.reason = reason


class TinyFuture(Generic[T]):
    """A Future representing an eventual result of an asynchronous operation.

    Provides a way to settle the result once, check completion status, retrieve results
    when ready, and register listeners on the success and error channels.
    """

    def __init__(self, uid: str | None = None, callback_pool: Executor | None = None) -> None:
        """Initialize a new, unsettled Future.

        Args:
            uid: Unique identifier for this future, generated if not given
            callback_pool: Executor for running listeners, or None to run them inline
                on the thread that settles the future or registers the listener
        """
        self._uid = uid or str(uuid.uuid4())
        self._outcome: Outcome[T] | None = None
        self._callbacks: list[Callable[[T], Any]] = []
        self._errbacks: list[Callable[[Any], Any]] = []
        self._batches: deque[tuple[list[Callable[[Any], Any]], Any]] = deque()
        self._draining = False
        self._lock = threading.Lock()
        self._is_done = threading.Event()
        self._callback_pool = callback_pool

    def __repr__(self) -> str:
        if self._outcome is None:
            state = "pending"
        elif isinstance(self._outcome, Failed):
            state = f"failed {self._outcome.error!r}"
        else:
            state = f"succeeded {self._outcome.value!r}"
        return f"<TinyFuture {self._uid} {state}>"

    @property
    def uid(self) -> str:
        return self._uid

    def set_result(self, value: T) -> bool:
        """Complete this Future with a value.

        Args:
            value: The result value to store

        Returns:
            True if the future was settled, False if it was already settled and
            the call had no effect
        """
        return self._settle(Succeeded(value))

    def set_exception(self, error: Any) -> bool:
        """Complete this Future with an error.

        Args:
            error: The error to store, usually an exception

        Returns:
            True if the future was settled, False if it was already settled and
            the call had no effect
        """
        return self._settle(Failed(error))

    def _settle(self, outcome: Outcome[T]) -> bool:
        with self._lock:
            if self._outcome is not None:
                logger.debug("Future %s already settled, ignoring %r", self._uid, outcome)
                return False
            self._outcome = outcome
            self._is_done.set()
            listeners = self._errbacks if isinstance(outcome, Failed) else self._callbacks
            self._callbacks = []
            self._errbacks = []
            start = self._enqueue(listeners, _payload(outcome))
        logger.debug("Future %s settled with %r", self._uid, outcome)
        if start:
            self._start_draining()
        return True

    def _enqueue(self, listeners: list[Callable[[Any], Any]], payload: Any) -> bool:
        """Queue a batch of listeners. Must hold ``_lock``.

        Returns:
            True if the caller has to start draining the queue
        """
        if not listeners:
            return False
        self._batches.append((listeners, payload))
        if self._draining:
            return False
        self._draining = True
        return True

    def _start_draining(self) -> None:
        if self._callback_pool is None:
            _run_on_this_thread(self._drain)
        else:
            self._callback_pool.submit(self._drain)

    def _drain(self) -> None:
        # Only one drain per future runs at a time, so batches run in FIFO order.
        while True:
            with self._lock:
                if not self._batches:
                    self._draining = False
                    return
                listeners, payload = self._batches.popleft()
            try:
                self._run_listeners(listeners, payload)
            except BaseException:
                with self._lock:
                    self._draining = False
                raise

    def _run_listeners(self, listeners: list[Callable[[Any], Any]], payload: Any) -> None:
        for listener in listeners:
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener %r of future %s raised", listener, self._uid)

    def result(self, timeout: float | None = None) -> T:
        """Retrieve the result of this Future, waiting if necessary.

        Blocks until the result is available or timeout occurs. If the future
        failed, its error will be raised.

        Args:
            timeout: Maximum seconds to wait for the result, or None to wait forever

        Returns:
            The result value

        Raises:
            TimeoutError: If the timeout is reached before completion
            RejectedError: If the Future failed with something that is not an exception
            Exception: If the Future failed with an exception
        """
        outcome = self._wait(timeout)
        if isinstance(outcome, Failed):
            if isinstance(outcome.error, BaseException):
                raise outcome.error
            raise RejectedError(outcome.error)
        return outcome.value

    def exception(self, timeout: float | None = None) -> Any:
        """Retrieve the error of this Future, waiting if necessary.

        Args:
            timeout: Maximum seconds to wait, or None to wait forever

        Returns:
            The error payload, or None if the Future succeeded

        Raises:
            TimeoutError: If the timeout is reached before completion
        """
        outcome = self._wait(timeout)
        return outcome.error if isinstance(outcome, Failed) else None

    def _wait(self, timeout: float | None) -> Outcome[T]:
        if not self._is_done.wait(timeout):
            raise TimeoutError(f"Future {self._uid} not settled after {timeout} seconds")
        assert self._outcome is not None  # for type checker
        return self._outcome

    @property
    def done(self) -> bool:
        """Whether this Future has completed.

        Returns:
            True if the Future has a result or error set, False if still pending
        """
        return self._outcome is not None

    @property
    def outcome(self) -> Outcome[T] | None:
        """The settled outcome, or None while pending."""
        return self._outcome

    def add_callback(self, callback: Callable[[T], Any]) -> None:
        """Register a function to call when this Future succeeds.

        If the Future has already succeeded, the callback is executed right away, after any
        listeners of this Future that are still queued.
        It is never called if the Future fails.

        Args:
            callback: Function to call with the Future's value when ready
        """
        self._add_listener(callback, Succeeded)

    def add_errback(self, errback: Callable[[Any], Any]) -> None:
        """Register a function to call when this Future fails.

        If the Future has already failed, the errback is executed right away, after any
        listeners of this Future that are still queued.
        It is never called if the Future succeeds.

        Args:
            errback: Function to call with the Future's error when ready
        """
        self._add_listener(errback, Failed)

    def _add_listener(self, listener: Callable[[Any], Any], channel: type) -> None:
        with self._lock:
            if self._outcome is None:
                if channel is Failed:
                    self._errbacks.append(listener)
                else:
                    self._callbacks.append(listener)
                return
            if not isinstance(self._outcome, channel):
                return
            start = self._enqueue([listener], _payload(self._outcome))
        if start:
            self._start_draining()

    def spawn(self) -> "TinyFuture[Any]":
        """Create a new unsettled Future that shares this one's callback pool."""
        return TinyFuture(callback_pool=self._callback_pool)

    def then(
        self,
        on_success: Callable[[T], Any] | None = None,
        on_error: Callable[[Any], Any] | None = None,
    ) -> "TinyFuture[Any]":
        """Chain callbacks onto this Future.

        The returned Future settles with whatever the matching callback returns, fails
        with whatever it raises, and waits on any future it returns. A missing callback
        passes the value or error through unchanged. This Future is never modified.

        Args:
            on_success: Called with this Future's value if it succeeds
            on_error: Called with this Future's error if it fails

        Returns:
            A new Future for the outcome of the callback
        """
        return cast("TinyFuture[Any]", chain(self, on_success, on_error))


def _payload(outcome: Outcome[Any]) -> Any:
    return outcome.error if isinstance(outcome, Failed) else outcome.value


_inline = threading.local()


def _run_on_this_thread(job: Callable[[], None]) -> None:
    """Run ``job`` on the current thread, queueing it if a job is already running here.

    Settling a future from inside a listener queues that future's drain instead of
    recursing into it, so the stack stays flat however long a chain gets.
    """
    jobs: deque[Callable[[], None]] | None = getattr(_inline, "jobs", None)
    if jobs is None:
        jobs = _inline.jobs = deque()
    jobs.append(job)
    if getattr(_inline, "running", False):
        return
    _inline.running = True
    try:
        while jobs:
            jobs.popleft()()
    finally:
        _inline.running = False


def resolved(value: T, callback_pool: Executor | None = None) -> TinyFuture[T]:
    """Create a Future that has already succeeded with ``value``."""
    future: TinyFuture[T] = TinyFuture(callback_pool=callback_pool)
    future.set_result(value)
    return future


def rejected(error: Any, callback_pool: Executor | None = None) -> TinyFuture[Any]:
    """Create a Future that has already failed with ``error``."""
    future: TinyFuture[Any] = TinyFuture(callback_pool=callback_pool)
    future.set_exception(error)
    return future
