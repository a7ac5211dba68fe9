"""Timing utilities for performance measurement."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Generator, Tuple


@contextmanager
def timer() -> Generator[Callable[[], float], None, None]:
    """Context manager that measures execution time.

    The yielded callable returns the seconds elapsed since entry; after the
    block exits it keeps returning the duration of the whole block.
    """
    start_time = time.perf_counter()
    end_time = None

    def get_elapsed() -> float:
        return (end_time if end_time is not None else time.perf_counter()) - start_time

    try:
        yield get_elapsed
    finally:
        end_time = time.perf_counter()


def time_function(func, *args, **kwargs) -> Tuple[object, float]:
    """Time a function execution and return (result, duration)."""
    start_time = time.perf_counter()
    result = func(*args, **kwargs)
    duration = time.perf_counter() - start_time
    return result, duration
