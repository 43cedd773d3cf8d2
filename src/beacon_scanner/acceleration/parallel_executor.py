"""
Process-based fan-out for scanner-pair work.

Fingerprint intersections and transform solves are independent per scanner
pair. PairParallelExecutor spreads them over a multiprocessing pool and hands
back one result per pair, in the order the pairs were given.
"""

from __future__ import annotations

import time
from multiprocessing import Pool, cpu_count
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..utils.logging import setup_logger

logger = setup_logger(__name__)

ProgressCallback = Callable[[int, int], None]


def _run_job(job: Tuple[int, Any, Callable, Dict[str, Any]]) -> Tuple[int, Any, Optional[str]]:
    """
    Run one pair job inside a pool process.

    Lives at module level so the pool can pickle it. Exceptions are turned
    into a message so one bad pair does not tear down the pool.

    Returns:
        (position, result or None, error message or None)
    """
    position, pair, worker_fn, worker_kwargs = job
    try:
        return (position, worker_fn(pair, **worker_kwargs), None)
    except Exception as e:
        error_msg = f"{type(e).__name__}: {e}"
        logger.error(f"Worker error on pair {pair!r}: {error_msg}")
        return (position, None, error_msg)


class PairParallelExecutor:
    """
    Fan independent scanner-pair jobs out over worker processes.

    `map_pairs` returns only once every pair has been processed, so callers
    such as the transform-graph builder always see a complete edge set.

    Example:
        executor = PairParallelExecutor(n_workers=4)
        transforms = executor.map_pairs(
            pairs=[(0, 1), (1, 3)],
            worker_fn=solve_pair,
            worker_kwargs={'scanners': scanners, 'min_overlap': 12}
        )
    """

    def __init__(self, n_workers: Optional[int] = None):
        """
        Args:
            n_workers: Pool size. None means one fewer than the CPU count;
                values below 1 are raised to 1.
        """
        if n_workers is None:
            n_workers = cpu_count() - 1
        self.n_workers = max(1, int(n_workers))
        logger.debug(f"PairParallelExecutor: {self.n_workers} workers on {cpu_count()} CPUs")

    def map_pairs(
        self,
        pairs: Sequence[Any],
        worker_fn: Callable,
        worker_kwargs: Dict[str, Any],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[Any]:
        """
        Apply `worker_fn(pair, **worker_kwargs)` to every pair.

        A single worker or a single pair runs in-process; anything else goes
        through the pool.

        Args:
            pairs: Scanner index pairs (or any picklable job items)
            worker_fn: Picklable module-level function
            worker_kwargs: Keyword arguments shared by every call
            progress_callback: Called as callback(done, total) after each pair

        Returns:
            Results aligned with `pairs`

        Raises:
            RuntimeError: If any pair job raised
        """
        total = len(pairs)
        if total == 0:
            return []

        start = time.time()
        if self.n_workers == 1 or total == 1:
            results = self._map_in_process(pairs, worker_fn, worker_kwargs, progress_callback)
            mode = "in-process"
        else:
            results = self._map_in_pool(pairs, worker_fn, worker_kwargs, progress_callback)
            mode = f"{self.n_workers} workers"

        logger.debug(f"Processed {total} pairs ({mode}) in {time.time() - start:.2f}s")
        return results

    def _map_in_process(
        self,
        pairs: Sequence[Any],
        worker_fn: Callable,
        worker_kwargs: Dict[str, Any],
        progress_callback: Optional[ProgressCallback],
    ) -> List[Any]:
        results = []
        for done, pair in enumerate(pairs, start=1):
            try:
                results.append(worker_fn(pair, **worker_kwargs))
            except Exception as e:
                logger.error(f"Pair {pair!r} failed: {e}", exc_info=True)
                raise RuntimeError(f"Pair job failed for {pair!r}: {e}") from e
            if progress_callback:
                progress_callback(done, len(pairs))
        return results

    def _map_in_pool(
        self,
        pairs: Sequence[Any],
        worker_fn: Callable,
        worker_kwargs: Dict[str, Any],
        progress_callback: Optional[ProgressCallback],
    ) -> List[Any]:
        total = len(pairs)
        jobs = [(position, pair, worker_fn, worker_kwargs) for position, pair in enumerate(pairs)]
        by_position: Dict[int, Any] = {}
        failures: List[Tuple[Any, str]] = []

        try:
            with Pool(processes=min(self.n_workers, total)) as pool:
                # Completion order is arbitrary; results are slotted back by position
                for done, (position, result, error) in enumerate(pool.imap_unordered(_run_job, jobs), start=1):
                    if error is None:
                        by_position[position] = result
                    else:
                        failures.append((pairs[position], error))
                    if progress_callback:
                        progress_callback(done, total)
        except Exception as e:
            logger.error(f"Worker pool failed: {e}", exc_info=True)
            raise RuntimeError(f"Parallel pair processing failed: {e}") from e

        if failures:
            for pair, error in failures[:5]:
                logger.error(f"  pair {pair!r}: {error}")
            raise RuntimeError(f"{len(failures)} of {total} pair jobs failed")

        return [by_position[position] for position in range(total)]
