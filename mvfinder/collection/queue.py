"""
Sequential work queue.

Long runs against rate-limited services (searching many artists,
enriching the whole collection) go through a FIFO queue processed by a
single pull loop: one item is in flight at a time, and the end of an
item (success or exception) always moves on to the next one.

Usage:
    queue = WorkQueue(service.search_and_merge)
    queue.extend(["Muse", "Björk"])
    for result in queue.run(on_result=print):
        ...
"""

import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from mvfinder.core.logger import get_logger


logger = get_logger(__name__)


T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class WorkItemResult(Generic[T, R]):
    """
    Result of processing one queue item.

    Attributes:
        item: The item as queued.
        value: The worker's return value, None if it raised.
        error: The exception the worker raised, None on success.
    """
    item: T
    value: R | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class WorkQueue(Generic[T, R]):
    """
    FIFO queue drained by one worker function.

    Exceptions raised by the worker are captured in the item's result
    (and logged); they never stop the queue. KeyboardInterrupt is not an
    Exception and still propagates.
    """

    def __init__(self, worker: Callable[[T], R]) -> None:
        self.worker = worker
        self._items: deque[T] = deque()
        self._cancelled = False

    @property
    def pending(self) -> int:
        return len(self._items)

    def extend(self, items: Iterable[T]) -> None:
        self._items.extend(items)

    def cancel(self) -> None:
        """Stop after the item in flight. Remaining items stay queued."""
        self._cancelled = True

    def run(
        self,
        on_result: Callable[[WorkItemResult[T, R]], None] | None = None,
        delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep
    ) -> list[WorkItemResult[T, R]]:
        """
        Process queued items until the queue is empty or cancelled.

        Args:
            on_result: Called after every item with its result.
            delay: Seconds to wait before every item after the first.
            sleep: Sleep function (replaceable in tests).

        Returns:
            Results in processing order.
        """
        self._cancelled = False
        results: list[WorkItemResult[T, R]] = []

        while self._items and not self._cancelled:
            item = self._items.popleft()
            if results and delay > 0:
                sleep(delay)

            try:
                result = WorkItemResult(item=item, value=self.worker(item))
            except Exception as e:
                logger.debug(f"Work item {item!r} failed: {e}", exc_info=True)
                result = WorkItemResult(item=item, error=e)

            results.append(result)
            if on_result is not None:
                on_result(result)

        return results
