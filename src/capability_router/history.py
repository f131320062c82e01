# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Bounded routing history.

Fixed-capacity FIFO of dispatched decisions and their outcomes. Appending to
a full store evicts the oldest record under the same lock, so
``len(store) <= capacity`` always holds and ``snapshot()`` never observes a
half-applied append.

Records are kept in completion order, not submission order.

Concurrency: thread-safe using threading.Lock (and therefore also safe for
coroutines on one event loop, since no operation awaits while holding it).
"""

from __future__ import annotations

import logging
import threading
from collections import deque

from capability_router.models import ModelHistoryRecord

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_CAPACITY = 100


class HistoryStore:
    """Thread-safe ring buffer of ModelHistoryRecord."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        if capacity < 1:
            msg = f"capacity must be >= 1, got {capacity}"
            raise ValueError(msg)
        self._capacity = capacity
        self._records: deque[ModelHistoryRecord] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, record: ModelHistoryRecord) -> None:
        """Append a record, evicting the oldest one when full."""
        with self._lock:
            evicting = len(self._records) == self._capacity
            self._records.append(record)

        if evicting:
            logger.debug(
                "History full, evicted oldest record",
                extra={"capacity": self._capacity},
            )

    def snapshot(self) -> list[ModelHistoryRecord]:
        """Consistent copy of the current records, oldest first."""
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = [
    "DEFAULT_HISTORY_CAPACITY",
    "HistoryStore",
]
