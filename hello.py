import logging
from typing import Any

from tiny_promise.future import TinyFuture


def find_first(items_future: TinyFuture[list[int]]) -> TinyFuture[Any]:
    return items_future.then(lambda items: items[0])


def find_last(items_future: TinyFuture[list[int]]) -> TinyFuture[Any]:
    return items_future.then(lambda items: items[-1])


def print_first_and_last(items_future: TinyFuture[list[int]]) -> None:
    find_first(items_future).then(print)
    find_last(items_future).then(print)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    items = TinyFuture()
    print_first_and_last(items)
    # nothing printed yet, then prints 1 and 5
    items.set_result([1, 2, 3, 4, 5])
