"""
Parallel execution infrastructure for scan-pair processing.

Provides PairParallelExecutor for distributing independent work items
(fingerprint computation, alignment attempts) across multiple CPU cores
using multiprocessing.
"""

from __future__ import annotations

import logging
import time
from multiprocessing import Pool, cpu_count
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


def _worker_wrapper(args: Tuple[int, Any, Callable, Dict[str, Any]]) -> Tuple[int, Any, Optional[str]]:
    """
    Worker wrapper function for parallel task processing.

    Must be at module level for pickling on Windows.

    Args:
        args: Tuple of (task_index, task, worker_fn, worker_kwargs)

    Returns:
        Tuple of (task_index, result, error_message)
    """
    idx, task, worker_fn, worker_kwargs = args
    try:
        result = worker_fn(task, **worker_kwargs)
        return (idx, result, None)
    except Exception as e:
        error_msg = f"{type(e).__name__}: {str(e)}"
        logger.error(f"Worker error on task {idx}: {error_msg}")
        return (idx, None, error_msg)


class PairParallelExecutor:
    """
    Parallel executor for independent per-scan and per-pair work.

    Workers only read the scans handed to them; results come back to the
    parent process in input order, so any state derived from them is
    committed by a single writer.

    Example:
        executor = PairParallelExecutor(n_workers=4)
        results = executor.map_tasks(
            tasks=[(reference, candidate), ...],
            worker_fn=align_pair,
            worker_kwargs={'min_overlap': 12},
        )
    """

    def __init__(self, n_workers: Optional[int] = None):
        """
        Initialize parallel executor.

        Args:
            n_workers: Number of worker processes. If None, uses cpu_count - 1
                to leave one core for coordination. Minimum is 1.
        """
        if n_workers is None:
            n_workers = max(1, cpu_count() - 1)
        else:
            n_workers = max(1, int(n_workers))

        self.n_workers = n_workers

        logger.info(
            f"Initialized PairParallelExecutor with {self.n_workers} workers "
            f"(total CPUs: {cpu_count()})"
        )

    def map_tasks(
        self,
        tasks: List[Any],
        worker_fn: Callable,
        worker_kwargs: Optional[Dict[str, Any]] = None,
    ) -> List[Any]:
        """
        Map worker function over tasks, in parallel when it pays off.

        Args:
            tasks: Work items (picklable)
            worker_fn: Module-level function with signature
                worker_fn(task, **worker_kwargs) -> result
            worker_kwargs: Fixed keyword arguments passed to each call

        Returns:
            List of results in same order as input tasks

        Raises:
            RuntimeError: If any task fails
        """
        worker_kwargs = worker_kwargs or {}
        n_tasks = len(tasks)

        if n_tasks == 0:
            return []

        start_time = time.time()

        # If only 1 worker or 1 task, use sequential processing (no pool overhead)
        if self.n_workers == 1 or n_tasks == 1:
            results = []
            for i, task in enumerate(tasks):
                try:
                    results.append(worker_fn(task, **worker_kwargs))
                except Exception as e:
                    logger.error(f"Error processing task {i}: {e}", exc_info=True)
                    raise RuntimeError(f"Task processing failed: {e}") from e
            logger.debug(
                f"Sequential processing complete: {n_tasks} tasks in {time.time() - start_time:.3f}s"
            )
            return results

        results = self._parallel_map(tasks, worker_fn, worker_kwargs)
        logger.debug(
            f"Parallel processing complete: {n_tasks} tasks in {time.time() - start_time:.3f}s "
            f"on {self.n_workers} workers"
        )
        return results

    def _parallel_map(
        self,
        tasks: List[Any],
        worker_fn: Callable,
        worker_kwargs: Dict[str, Any],
    ) -> List[Any]:
        """
        Execute parallel mapping using multiprocessing.Pool.

        Uses imap_unordered for responsiveness, then reorders results to
        match input order.
        """
        n_tasks = len(tasks)
        worker_args = [(i, task, worker_fn, worker_kwargs) for i, task in enumerate(tasks)]

        results_dict: Dict[int, Any] = {}
        errors = []
        with Pool(processes=min(self.n_workers, n_tasks)) as pool:
            for idx, result, error in pool.imap_unordered(_worker_wrapper, worker_args):
                if error:
                    errors.append((idx, error))
                else:
                    results_dict[idx] = result

        if errors:
            error_msg = f"{len(errors)} tasks failed out of {n_tasks}"
            logger.error(error_msg)
            for idx, error in errors[:5]:  # Log first 5 errors
                logger.error(f"  Task {idx}: {error}")
            if len(errors) > 5:
                logger.error(f"  ... and {len(errors) - 5} more errors")
            raise RuntimeError(error_msg)

        return [results_dict[i] for i in range(n_tasks)]
