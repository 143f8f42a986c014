"""
Bucket - Named FIFO queue with a capped poll history and single-step undo

Items are polled from the front. Every successful poll records a snapshot of
the removed item and the epoch second it left the queue, so the last poll can
be reverted with undo().

Capacity policy:
    Both sequences have a limit (default 100). When a limit is reached the
    guard wipes the whole sequence instead of evicting the oldest entry.
    add_item()/add_items() drop the incoming item(s) when that happens.

    undo() does not check items_limit, so it can push the queue above its cap.

Usage:
    bucket = Bucket("downloads", items_limit=50)
    bucket.add_items(["a", "b"])
    bucket.poll()   # -> "a"
    bucket.undo()   # "a" is back, at the tail
"""
from __future__ import annotations

import copy
import logging
import time
from collections import deque
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Deque,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    NamedTuple,
    Optional,
    Tuple,
    TypeVar,
)

from rbucket.logging_utils import format_count, truncate_list

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from rbucket.config import BucketConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ITEMS_LIMIT = 100
DEFAULT_HISTORY_LIMIT = 100


def epoch_seconds() -> int:
    """Current wall-clock time in whole seconds since the epoch."""
    return int(time.time())


class HistoryEntry(NamedTuple):
    """Items removed by one poll and the epoch second they were removed."""

    snapshot: Tuple[Any, ...]
    timestamp: int


class Bucket(Generic[T]):
    """
    Bounded, named FIFO queue that remembers what was polled from it.

    Not thread-safe. Wrap shared instances in rbucket.shared.SharedBucket.
    """

    def __init__(
        self,
        name: str,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        items_limit: int = DEFAULT_ITEMS_LIMIT,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Create an empty bucket

        Args:
            name: Label for the bucket (never changes)
            history_limit: Max history entries before the history guard fires
            items_limit: Max pending items before the items guard fires
            clock: Zero-arg callable returning epoch seconds (default: wall clock)

        Limits are not validated; zero or negative limits make the
        corresponding guard fire on every check.
        """
        self._name = name
        self.items: Deque[T] = deque()
        self.history: List[HistoryEntry] = []
        self.items_limit = items_limit
        self.history_limit = history_limit
        self._clock = clock or epoch_seconds
        self._last_timestamp = 0
        self._counters: Dict[str, int] = {
            'total_added': 0,
            'total_polled': 0,
            'total_undone': 0,
            'items_guard_fires': 0,
            'history_guard_fires': 0,
        }

    @classmethod
    def from_config(
        cls,
        name: str,
        config: "BucketConfig",
        clock: Optional[Callable[[], int]] = None,
    ) -> "Bucket[T]":
        """Build a bucket using the limits from a BucketConfig."""
        return cls(
            name,
            history_limit=config.history_limit,
            items_limit=config.items_limit,
            clock=clock,
        )

    @property
    def name(self) -> str:
        return self._name

    # ------------------------------------------------------------------
    # Queue operations
    # ------------------------------------------------------------------

    def add_item(self, item: T) -> bool:
        """
        Append one item to the tail

        Returns:
            False if the items guard fired (queue wiped, item dropped)
        """
        if self.items_limit_guard():
            logger.debug(f"[{self._name}] dropped item after items guard: {item!r}")
            return False
        self.items.append(item)
        self._counters['total_added'] += 1
        return True

    def add_items(self, items: Iterable[T]) -> bool:
        """
        Append a batch to the tail, preserving order

        The guard is checked once before the batch. It also fires when the
        batch would carry the queue past items_limit. Either way the queue
        is wiped and the whole batch is dropped; there is no partial insertion.

        Returns:
            False if the items guard fired
        """
        batch = list(items)
        fired = self.items_limit_guard()
        if not fired and len(self.items) + len(batch) > self.items_limit:
            self._wipe_items("would be exceeded by batch")
            fired = True
        if fired:
            logger.debug(
                f"[{self._name}] dropped batch of {format_count(len(batch), 'item')} after items guard"
            )
            return False
        self.items.extend(batch)
        self._counters['total_added'] += len(batch)
        return True

    def poll(self) -> Optional[T]:
        """
        Remove and return the front item, recording it in history

        Guards run in order: items, then history, then the front item is
        removed. A poll that wipes the queue still runs the history guard.

        Returns:
            The oldest pending item, or None if there is nothing to poll
            (also None when the items guard wipes the queue first)
        """
        if not self.items:
            return None

        # Adds never leave the queue above its limit; this only trips after
        # set_items_limit() lowered the cap or undo() overfilled the queue.
        wiped = len(self.items) > self.items_limit
        if wiped:
            self._wipe_items("exceeded")
        self.history_limit_guard()
        if wiped:
            return None

        item = self.items.popleft()
        timestamp = self._next_timestamp()
        self.history.append(HistoryEntry((copy.deepcopy(item),), timestamp))
        self._last_timestamp = timestamp
        self._counters['total_polled'] += 1
        return item

    def peek(self) -> Optional[T]:
        """Front item without removing it, or None if empty."""
        if not self.items:
            return None
        return self.items[0]

    def undo(self) -> bool:
        """
        Put the most recently polled item(s) back at the tail

        items_limit is not enforced here.

        Returns:
            False if there was no history to undo
        """
        if not self.history:
            return False
        snapshot, timestamp = self.history.pop()
        self.items.extend(snapshot)
        self._counters['total_undone'] += 1
        logger.debug(
            f"[{self._name}] undo restored {format_count(len(snapshot), 'item')} polled at {timestamp}"
        )
        if len(self.items) > self.items_limit:
            logger.debug(
                f"[{self._name}] undo left {len(self.items)} items above limit {self.items_limit}"
            )
        return True

    def clear_items(self) -> None:
        self.items.clear()

    def clear_history(self) -> None:
        self.history.clear()

    def _next_timestamp(self) -> int:
        # Clock may step backwards (NTP); polls must stay non-decreasing
        return max(int(self._clock()), self._last_timestamp)

    # ------------------------------------------------------------------
    # Limits and guards
    # ------------------------------------------------------------------

    def set_items_limit(self, limit: int) -> None:
        """Change the items limit; current contents are checked on the next guard."""
        self.items_limit = limit

    def set_history_limit(self, limit: int) -> None:
        """Change the history limit; current contents are checked on the next guard."""
        self.history_limit = limit

    def items_limit_reached(self) -> bool:
        return len(self.items) >= self.items_limit

    def history_limit_reached(self) -> bool:
        return len(self.history) >= self.history_limit

    def items_limit_guard(self) -> bool:
        """Wipe all pending items if the items limit is reached. Returns True if it fired."""
        if not self.items_limit_reached():
            return False
        self._wipe_items("reached")
        return True

    def _wipe_items(self, reason: str) -> None:
        dropped = len(self.items)
        self.clear_items()
        self._counters['items_guard_fires'] += 1
        logger.info(
            f"[{self._name}] items limit {self.items_limit} {reason}, cleared {format_count(dropped, 'item')}"
        )

    def history_limit_guard(self) -> bool:
        """Wipe the history if the history limit is reached. Returns True if it fired."""
        if not self.history_limit_reached():
            return False
        dropped = len(self.history)
        self.clear_history()
        self._counters['history_guard_fires'] += 1
        logger.info(
            f"[{self._name}] history limit {self.history_limit} reached, "
            f"cleared {format_count(dropped, 'entry', 'entries')}"
        )
        return True

    # ------------------------------------------------------------------
    # Traversal, duplication, diagnostics
    # ------------------------------------------------------------------

    def iter(self) -> Iterator[T]:
        """Iterate the live pending items, front to back."""
        return iter(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def clone(self) -> "Bucket[T]":
        """
        Fresh-start copy: same name, limits and (deep-copied) items, empty history

        Stats counters start from zero as well.
        """
        duplicate = type(self)(
            self._name,
            history_limit=self.history_limit,
            items_limit=self.items_limit,
            clock=self._clock,
        )
        duplicate.items.extend(copy.deepcopy(item) for item in self.items)
        return duplicate

    def clone_from(self, source: "Bucket[T]") -> None:
        """Become a clone of source, discarding this bucket's own state."""
        duplicate = source.clone()
        self._name = duplicate._name
        self.items = duplicate.items
        self.history = duplicate.history
        self.items_limit = duplicate.items_limit
        self.history_limit = duplicate.history_limit
        self._clock = duplicate._clock
        self._last_timestamp = duplicate._last_timestamp
        self._counters = duplicate._counters

    def __copy__(self) -> "Bucket[T]":
        return self.clone()

    def __deepcopy__(self, memo) -> "Bucket[T]":
        return self.clone()

    def get_stats(self) -> dict:
        """Get lifetime counters plus current sizes"""
        return {
            **self._counters,
            'items': len(self.items),
            'history': len(self.history),
            'items_limit': self.items_limit,
            'history_limit': self.history_limit,
        }

    def __repr__(self) -> str:
        preview = truncate_list(list(self.items), max_items=5, format_fn=repr)
        return (
            f"Bucket(name={self._name!r}, items={len(self.items)}/{self.items_limit}, "
            f"history={len(self.history)}/{self.history_limit}, pending=[{preview}])"
        )
