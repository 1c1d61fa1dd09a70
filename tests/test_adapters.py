# tests/test_adapters.py
import pytest
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from tiny_promise.adapters import from_concurrent
from tiny_promise.future import resolved


def test_from_concurrent_result():
    """Test chaining off work submitted to a standard executor."""
    with ThreadPoolExecutor(max_workers=2) as executor:
        future = from_concurrent(executor.submit(lambda: 20))
        doubled = future.then(lambda x: x * 2)
        assert doubled.result(timeout=5) == 40


def test_from_concurrent_exception():
    def failing():
        raise ValueError("Test error")

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = from_concurrent(executor.submit(failing))
        with pytest.raises(ValueError, match="Test error"):
            future.result(timeout=5)


def test_from_concurrent_already_done():
    source: Future[str] = Future()
    source.set_result("done")
    assert from_concurrent(source).result(timeout=1) == "done"


def test_from_concurrent_cancelled():
    source: Future[int] = Future()
    future = from_concurrent(source)
    assert source.cancel()
    assert isinstance(future.exception(timeout=1), CancelledError)


def test_flatten_wrapped_future():
    """A callback may return a wrapped executor future and be waited on."""
    with ThreadPoolExecutor(max_workers=1) as executor:
        continuation = resolved(5).then(lambda x: from_concurrent(executor.submit(pow, x, 2)))
        assert continuation.result(timeout=5) == 25
