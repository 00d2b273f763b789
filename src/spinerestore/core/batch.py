"""Worker pool for per-file batch work.

Per-file tasks are independent: each owns one path and shares nothing with its
siblings except the progress counter. Work is spread over a thread pool sized
to the CPU count unless configured otherwise. There is no cancellation; a
submitted batch always runs to completion.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, TypeVar

from spinerestore.utils.config import resolve_workers

T = TypeVar("T")
R = TypeVar("R")

ProgressCallback = Callable[[int, int], None]


class ProgressCounter:
    """Monotonic completion counter shared by workers.

    The lock covers the increment only. The callback receives
    ``(completed, total)`` and must itself be safe to call from worker threads.
    """

    def __init__(self, total: int, callback: Optional[ProgressCallback] = None) -> None:
        self.total = total
        self._callback = callback
        self._completed = 0
        self._lock = threading.Lock()

    @property
    def completed(self) -> int:
        return self._completed

    def increment(self) -> int:
        with self._lock:
            self._completed += 1
            completed = self._completed
        if self._callback is not None:
            self._callback(completed, self.total)
        return completed


def run_batch(
    items: Sequence[T],
    func: Callable[[T], R],
    *,
    workers: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
) -> List[R]:
    """Apply *func* to every item on a thread pool.

    *func* is expected to handle its own per-item errors; an exception escaping
    it propagates once the pool has drained.

    Args:
        items: Materialized work items.
        func: Per-item function.
        workers: Pool size; None/0 resolves through configuration.
        progress: Optional ``(completed, total)`` callback.

    Returns:
        Results in the same order as *items*.
    """
    if not items:
        return []
    counter = ProgressCounter(len(items), progress)
    max_workers = min(resolve_workers(workers or None), len(items))

    def task(item: T) -> R:
        try:
            return func(item)
        finally:
            counter.increment()

    with ThreadPoolExecutor(
        max_workers=max_workers, thread_name_prefix="spinerestore"
    ) as executor:
        return list(executor.map(task, items))
