from __future__ import annotations

import threading
import time
from typing import Generic, TypeVar

T = TypeVar("T")


class SlotClosed(Exception):
    """Raised by ``LatestSlot.get`` once the slot is closed and drained."""


class LatestSlot(Generic[T]):
    """Single-slot channel that keeps only the most recent item.

    Producers never block: ``put`` overwrites an item the consumer has not
    picked up yet and bumps ``dropped``. This mirrors a camera analyzer with a
    keep-only-latest backpressure strategy.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._item: T | None = None
        self._has_item = False
        self._closed = False
        self.dropped = 0
        self.delivered = 0

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def put(self, item: T) -> bool:
        """Store ``item``; return ``False`` if the slot is already closed."""
        with self._cond:
            if self._closed:
                return False
            if self._has_item:
                self.dropped += 1
            self._item = item
            self._has_item = True
            self._cond.notify()
            return True

    def get(self, timeout: float | None = None) -> T:
        """Take the pending item, waiting up to ``timeout`` seconds.

        Raises ``TimeoutError`` when nothing arrived in time and ``SlotClosed``
        after ``close`` once no item is left.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while not self._has_item:
                if self._closed:
                    raise SlotClosed("slot is closed")
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    raise TimeoutError("no item available")
                self._cond.wait(remaining)
            item = self._item
            self._item = None
            self._has_item = False
            self.delivered += 1
            return item  # type: ignore[return-value]

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()
