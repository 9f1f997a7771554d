"""Parallel Executor - fans out independent tasks and joins before proceeding."""

import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional


class ParallelExecutor:
    """Runs a batch of tasks with bounded concurrency and all-or-nothing semantics."""

    def __init__(self, max_workers: int, logger: Any):
        """
        Initialize parallel executor.

        Args:
            max_workers: Maximum number of tasks running at once
            logger: Logger instance
        """
        self.max_workers = max(1, max_workers)
        self.logger = logger

    def run_all(
        self,
        tasks: list[Callable[[], Any]],
        task_names: Optional[list[str]] = None,
    ) -> list[Any]:
        """
        Execute every task and return their results in submission order.

        The first failure is re-raised once it is observed; tasks that have
        not started yet are cancelled, running ones are allowed to finish
        and their results are discarded.

        Args:
            tasks: Zero-argument callables
            task_names: Optional names for logging

        Returns:
            Results, one per task, in the order given
        """
        if not tasks:
            return []

        names = [
            task_names[i] if task_names and i < len(task_names) else f"task_{i+1}"
            for i in range(len(tasks))
        ]

        # If max_workers is 1, execute sequentially
        if self.max_workers == 1:
            results = []
            for name, task in zip(names, tasks):
                self.logger.debug(f"Executing {name}...")
                results.append(task())
            return results

        self.logger.debug(f"Parallel execution: {len(tasks)} tasks with max {self.max_workers} workers")
        start_time = time.time()

        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            futures = [executor.submit(task) for task in tasks]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            for future, name in zip(futures, names):
                if future in done and future.exception() is not None:
                    self.logger.warning(f"❌ {name} failed, abandoning {len(pending)} unfinished task(s)")
                    raise future.exception()
        finally:
            # Queued tasks never start; running ones finish before we return
            executor.shutdown(wait=True, cancel_futures=True)

        elapsed = time.time() - start_time
        self.logger.debug(f"Batch complete: {len(tasks)} tasks in {elapsed:.2f}s")
        return [future.result() for future in futures]
