"""Outcome types for a settled future.

A future that has been settled holds exactly one of these. Callbacks are run
through ``guarded_call`` so that a raised exception becomes a ``Failed``
outcome instead of escaping to whoever triggered the callback.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Succeeded(Generic[T]):
    """The future completed with a value."""

    value: T


@dataclass(frozen=True)
class Failed:
    """The future completed with an error payload (usually an exception)."""

    error: Any


Outcome = Union[Succeeded[T], Failed]


def guarded_call(fn: Callable[[Any], T], payload: Any) -> Outcome[T]:
    """Call ``fn(payload)`` and capture how it finished.

    Args:
        fn: One-argument callable to invoke
        payload: The argument to pass

    Returns:
        ``Succeeded`` with the return value, or ``Failed`` with the raised exception
    """
    try:
        return Succeeded(fn(payload))
    except Exception as e:
        return Failed(e)
