"""Bounded retry with a fixed delay schedule."""

import time
from typing import Any, Callable, Sequence, TypeVar

T = TypeVar("T")


def call_with_retry(
    func: Callable[[], T],
    *,
    attempts: int,
    delays: Sequence[float],
    retry_on: tuple[type[BaseException], ...],
    logger: Any,
    operation: str,
    should_retry: Callable[[BaseException], bool] = lambda e: True,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call ``func`` up to ``attempts`` times.

    Only exceptions in ``retry_on`` for which ``should_retry`` holds are
    retried; anything else propagates immediately. The last failure is
    re-raised once attempts are exhausted.
    """
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        # Sleep before retry (except first attempt)
        if attempt > 1:
            delay = delays[min(attempt - 2, len(delays) - 1)] if delays else 0.0
            logger.info(f"Waiting {delay}s before {operation} attempt {attempt}/{attempts}...")
            sleep(delay)
        try:
            return func()
        except retry_on as e:
            if attempt >= attempts or not should_retry(e):
                raise
            logger.warning(f"{operation} attempt {attempt}/{attempts} failed: {e}")
    raise AssertionError("unreachable")
