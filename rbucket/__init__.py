"""Bounded, named FIFO buckets with poll history and single-step undo."""

from .bucket import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_ITEMS_LIMIT,
    Bucket,
    HistoryEntry,
    epoch_seconds,
)
from .config import BucketConfig, load_config
from .shared import SharedBucket

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_ITEMS_LIMIT",
    "Bucket",
    "HistoryEntry",
    "epoch_seconds",
    "BucketConfig",
    "load_config",
    "SharedBucket",
]
