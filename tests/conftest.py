"""Test configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from rbucket.bucket import Bucket


class FakeClock:
    """Deterministic epoch-seconds source. Call tick()/set() to move it."""

    def __init__(self, start: int = 1_700_000_000):
        self.now = start
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.now

    def tick(self, seconds: int = 1) -> None:
        self.now += seconds

    def set(self, value: int) -> None:
        self.now = value


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def bucket(clock):
    """Default-limit bucket driven by the fake clock."""
    return Bucket("test", clock=clock)
