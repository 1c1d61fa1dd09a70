"""Structural interfaces the chaining engine works against.

Nothing here checks nominal types: any object with the right methods is a
future as far as ``chain`` is concerned, and any object with a callable
``then`` is treated as a thenable.
"""

from typing import Any, Callable, Protocol, runtime_checkable

Listener = Callable[[Any], Any]


@runtime_checkable
class Thenable(Protocol):
    """Anything exposing a two-channel ``then``."""

    def then(self, on_success: Listener | None = None, on_error: Listener | None = None) -> Any: ...


class SettableFuture(Protocol):
    """The primitives ``chain`` needs from a source future and its continuation."""

    def add_callback(self, callback: Listener) -> None: ...

    def add_errback(self, errback: Listener) -> None: ...

    def set_result(self, value: Any) -> bool: ...

    def set_exception(self, error: Any) -> bool: ...

    def spawn(self) -> "SettableFuture": ...


def is_thenable(value: Any) -> bool:
    """Return True if ``value`` exposes a callable ``then`` attribute.

    Unlike ``isinstance(value, Thenable)``, which only checks that the attribute
    exists, a ``then`` that is not callable leaves the value a plain value.
    """
    return callable(getattr(value, "then", None))
