"""Lightweight timing for hot-path operations.

Provides a ``@profile_operation(name)`` decorator that measures a call
with ``time.perf_counter_ns`` and logs the elapsed time at DEBUG level.
Nothing is retained between calls, so decorated functions stay free of
shared state.

Usage::

    from dialect_engine.telemetry.profiling import profile_operation

    @profile_operation("migration.translate")
    def translate(sql, source, target):
        ...
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def profile_operation(name: str) -> Callable[[F], F]:
    """Decorator that logs the wall time of each call.

    Parameters
    ----------
    name:
        The operation name used in the log line (e.g. ``"lineage.extract"``).
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_ns = time.perf_counter_ns()
            try:
                return func(*args, **kwargs)
            finally:
                duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
                logger.debug("PROFILE %s: %.3f ms", name, duration_ms)

        return wrapper  # type: ignore[return-value]

    return decorator
