"""Worker pool for concurrent piece transfers.

This module provides:
- PiecePool: fans piece tasks out to worker threads and collects results

Results are gathered on the calling thread. The pool returns only once every
piece has been accounted for, so a caller never sees a partial result set:
either every piece succeeded, or the first failure is raised.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Mapping
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_WORKERS = 4


class _Skipped:
    """Marker for tasks dropped after another task failed."""


_SKIPPED = _Skipped()


class PiecePool(Generic[T, R]):
    """Pool of threads running one function over numbered pieces.

    Usage:
        pool = PiecePool(upload_piece, max_workers=4)
        refs = pool.run(pieces, on_result=report_progress)
    """

    def __init__(
        self,
        func: Callable[[int, T], R],
        max_workers: int = DEFAULT_WORKERS,
        name: str = "PiecePool",
    ) -> None:
        """Initialize the pool.

        Args:
            func: Called as func(piece_number, item) on a worker thread.
            max_workers: Maximum concurrent workers.
            name: Thread name prefix.
        """
        if max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self._func = func
        self._max_workers = max_workers
        self._name = name

    def run(
        self,
        items: Mapping[int, T],
        on_result: Callable[[int, R], None] | None = None,
    ) -> dict[int, R]:
        """Process every item and return results keyed by piece number.

        Args:
            items: Piece number to work item.
            on_result: Called on the calling thread as each piece completes.

        Returns:
            Piece number to result, for every item.

        Raises:
            The first exception raised by func; remaining queued pieces are skipped.
        """
        if not items:
            return {}

        tasks: queue.Queue[tuple[int, T] | None] = queue.Queue()
        results: queue.Queue[tuple[int, R | _Skipped | None, Exception | None]] = queue.Queue()
        cancelled = threading.Event()

        for number in sorted(items):
            tasks.put((number, items[number]))

        worker_count = min(self._max_workers, len(items))
        for _ in range(worker_count):
            tasks.put(None)

        def worker_loop() -> None:
            while True:
                task = tasks.get()
                if task is None:
                    # Poison pill - stop worker
                    return
                number, item = task
                if cancelled.is_set():
                    results.put((number, _SKIPPED, None))
                    continue
                try:
                    results.put((number, self._func(number, item), None))
                except Exception as e:
                    cancelled.set()
                    results.put((number, None, e))

        workers = [
            threading.Thread(target=worker_loop, name=f"{self._name}-{i}", daemon=True)
            for i in range(worker_count)
        ]
        for thread in workers:
            thread.start()

        collected: dict[int, R] = {}
        first_error: Exception | None = None
        for _ in range(len(items)):
            number, value, error = results.get()
            if error is not None:
                if first_error is None:
                    first_error = error
                    logger.debug(f"Piece {number} failed, cancelling remaining pieces: {error}")
                continue
            if isinstance(value, _Skipped) or first_error is not None:
                continue
            collected[number] = value  # type: ignore[assignment]
            if on_result:
                on_result(number, value)  # type: ignore[arg-type]

        for thread in workers:
            thread.join()

        if first_error is not None:
            raise first_error
        return collected
