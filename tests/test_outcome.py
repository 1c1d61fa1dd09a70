# tests/test_outcome.py
import pytest
from tiny_promise.outcome import Failed, Succeeded, guarded_call
from tiny_promise.protocols import Thenable, is_thenable
from tiny_promise.future import TinyFuture


def test_guarded_call_success():
    assert guarded_call(len, "abc") == Succeeded(3)


def test_guarded_call_failure():
    outcome = guarded_call(int, "not a number")
    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, ValueError)


def test_guarded_call_lets_base_exceptions_through():
    def leave(_):
        raise SystemExit(1)

    with pytest.raises(SystemExit):
        guarded_call(leave, None)


def test_is_thenable():
    class WithThen:
        def then(self, on_success=None, on_error=None):
            return self

    class WithAttribute:
        then = 42

    assert is_thenable(TinyFuture())
    assert is_thenable(WithThen())
    assert not is_thenable(WithAttribute())
    assert not is_thenable(None)
    assert not is_thenable(0)
    assert not is_thenable({"then": lambda: None})


def test_thenable_protocol():
    assert isinstance(TinyFuture(), Thenable)
    assert not isinstance(object(), Thenable)
