"""Small timing helpers used by the startup and shutdown paths."""

from __future__ import annotations

import time
from typing import Awaitable, Callable, Tuple, TypeVar

T = TypeVar("T")


async def measure_time(fn: Callable[[], Awaitable[T]]) -> Tuple[T, float]:
    """
    Await ``fn()`` and return ``(result, elapsed_ms)``.

    Exceptions propagate unchanged; no timing is reported for a failed call.
    """
    start = time.perf_counter()
    result = await fn()
    return result, (time.perf_counter() - start) * 1000


def elapsed_ms(start: float) -> float:
    """Milliseconds since ``start`` (a ``time.perf_counter()`` reading)."""
    return (time.perf_counter() - start) * 1000


__all__ = ["measure_time", "elapsed_ms"]
