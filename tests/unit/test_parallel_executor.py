"""Tests for the parallel executor and retry helper."""

import threading
import time
from unittest.mock import MagicMock

import pytest

from slideshow.utils.parallel_executor import ParallelExecutor
from slideshow.utils.retry import call_with_retry


@pytest.mark.parametrize("workers", [1, 4])
def test_run_all_preserves_order(logger, workers):
    tasks = [lambda i=i: (time.sleep(0.01 * (5 - i)), i)[1] for i in range(5)]

    assert ParallelExecutor(workers, logger).run_all(tasks) == [0, 1, 2, 3, 4]


def test_run_all_empty(logger):
    assert ParallelExecutor(4, logger).run_all([]) == []


def test_run_all_runs_concurrently(logger):
    barrier = threading.Barrier(3, timeout=5)
    tasks = [barrier.wait for _ in range(3)]

    ParallelExecutor(3, logger).run_all(tasks)


def test_run_all_raises_first_failure_and_skips_queued(logger):
    """A failure is propagated and tasks still queued never start."""
    started = []

    def fail():
        raise ValueError("broken")

    def slow(i):
        started.append(i)
        time.sleep(0.05)

    tasks = [fail] + [lambda i=i: slow(i) for i in range(20)]

    with pytest.raises(ValueError, match="broken"):
        ParallelExecutor(2, logger).run_all(tasks)

    assert len(started) < 20


def test_retry_succeeds_after_failures():
    func = MagicMock(side_effect=[KeyError("a"), KeyError("b"), "ok"])
    sleep = MagicMock()

    result = call_with_retry(
        func, attempts=3, delays=[1.0, 2.0], retry_on=(KeyError,), logger=MagicMock(), operation="op", sleep=sleep
    )

    assert result == "ok"
    assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]


def test_retry_reraises_after_last_attempt():
    func = MagicMock(side_effect=KeyError("always"))

    with pytest.raises(KeyError):
        call_with_retry(
            func, attempts=2, delays=[0.0], retry_on=(KeyError,), logger=MagicMock(), operation="op", sleep=MagicMock()
        )

    assert func.call_count == 2


def test_retry_respects_should_retry():
    func = MagicMock(side_effect=KeyError("fatal"))

    with pytest.raises(KeyError):
        call_with_retry(
            func,
            attempts=5,
            delays=[0.0],
            retry_on=(KeyError,),
            should_retry=lambda e: False,
            logger=MagicMock(),
            operation="op",
            sleep=MagicMock(),
        )

    assert func.call_count == 1


def test_retry_does_not_catch_other_exceptions():
    func = MagicMock(side_effect=ValueError("other"))

    with pytest.raises(ValueError):
        call_with_retry(
            func, attempts=3, delays=[0.0], retry_on=(KeyError,), logger=MagicMock(), operation="op", sleep=MagicMock()
        )

    assert func.call_count == 1
