"""
SharedBucket - External lock around a Bucket for use across threads

Bucket itself does no locking. Hold the lock for the whole logical operation
(for example an add followed by a poll) so that history order and timestamps
stay consistent:

    shared = SharedBucket(Bucket("jobs"))

    with shared.hold() as bucket:
        bucket.add_item(job)
        bucket.poll()

    # or, for the common pair
    shared.add_then_poll(job)
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Generic, Iterable, Iterator, List, Optional

from rbucket.bucket import Bucket, HistoryEntry, T

logger = logging.getLogger(__name__)


class SharedBucket(Generic[T]):
    """Bucket handle whose operations run under a single lock."""

    def __init__(self, bucket: Bucket[T], lock: Optional[Any] = None):
        """
        Args:
            bucket: Bucket to guard
            lock: Any context-manager lock (default: threading.Lock())
        """
        self._bucket = bucket
        self._lock = lock if lock is not None else threading.Lock()

    @property
    def name(self) -> str:
        return self._bucket.name

    @contextmanager
    def hold(self) -> Iterator[Bucket[T]]:
        """Acquire the lock and yield the underlying bucket."""
        with self._lock:
            yield self._bucket

    def add_item(self, item: T) -> bool:
        with self._lock:
            return self._bucket.add_item(item)

    def add_items(self, items: Iterable[T]) -> bool:
        with self._lock:
            return self._bucket.add_items(items)

    def poll(self) -> Optional[T]:
        with self._lock:
            return self._bucket.poll()

    def undo(self) -> bool:
        with self._lock:
            return self._bucket.undo()

    def add_then_poll(self, item: T) -> Optional[T]:
        """Add one item and poll the front of the queue without releasing the lock."""
        with self._lock:
            if not self._bucket.add_item(item):
                logger.debug(f"[{self._bucket.name}] add_then_poll: item dropped by items guard")
            return self._bucket.poll()

    def snapshot(self) -> List[T]:
        """Copy of the pending items, taken under the lock."""
        with self._lock:
            return list(self._bucket.iter())

    def history_snapshot(self) -> List[HistoryEntry]:
        """Copy of the history, taken under the lock."""
        with self._lock:
            return list(self._bucket.history)

    def __len__(self) -> int:
        with self._lock:
            return len(self._bucket)
