"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

from typing import Callable, List, Optional

import pytest

from flushkv.cache.flush import FlushCoordinator
from flushkv.cache.store import KeyValueStore
from flushkv.protocol.parser import ContentsParser
from flushkv.scheduling.timer import Timer
from flushkv.sink.memory import MemorySink


class ManualTimer(Timer):
    """
    Timer driven by the test instead of a clock.

    Usage:
        timer = ManualTimer(callback)
        timer.enable_timer(5)
        timer.fire()   # runs the callback as if 5 seconds had passed
    """

    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.delay: Optional[float] = None
        self.enable_calls: List[float] = []

    def enable_timer(self, delay: float) -> None:
        self.delay = delay
        self.enable_calls.append(delay)

    def disable_timer(self) -> None:
        self.delay = None

    def enabled(self) -> bool:
        return self.delay is not None

    def fire(self) -> None:
        assert self.enabled(), "fired a timer that was not enabled"
        self.delay = None
        self.callback()


class TimerRegistry:
    """Timer factory that remembers every timer it created."""

    def __init__(self):
        self.timers: List[ManualTimer] = []

    def __call__(self, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(callback)
        self.timers.append(timer)
        return timer

    @property
    def timer(self) -> ManualTimer:
        assert len(self.timers) == 1
        return self.timers[0]


class FlushCounter:
    """Stand-in flush action that counts invocations."""

    def __init__(self):
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


# ============================================================================
# Protocol Fixtures
# ============================================================================

@pytest.fixture
def parser() -> ContentsParser:
    """Create a ContentsParser instance."""
    return ContentsParser()


# ============================================================================
# Timer / Coordinator Fixtures
# ============================================================================

@pytest.fixture
def timers() -> TimerRegistry:
    """Timer factory producing manually fired timers."""
    return TimerRegistry()


@pytest.fixture
def flush_counter() -> FlushCounter:
    return FlushCounter()


@pytest.fixture
def armed_coordinator(flush_counter: FlushCounter, timers: TimerRegistry) -> FlushCoordinator:
    """Coordinator with a 5 second recurring timer."""
    return FlushCoordinator(flush_counter, flush_interval=5, timer_factory=timers)


@pytest.fixture
def disarmed_coordinator(flush_counter: FlushCounter, timers: TimerRegistry) -> FlushCoordinator:
    """Coordinator with no timer: every mutation flushes."""
    return FlushCoordinator(flush_counter, flush_interval=0, timer_factory=timers)


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def sink() -> MemorySink:
    """Create an empty in-memory sink."""
    return MemorySink()


@pytest.fixture
def store(sink: MemorySink, timers: TimerRegistry) -> KeyValueStore:
    """Store that flushes on every mutation."""
    return KeyValueStore(sink, flush_interval=0, timer_factory=timers)


@pytest.fixture
def armed_store(sink: MemorySink, timers: TimerRegistry) -> KeyValueStore:
    """Store that flushes every 5 seconds of (manual) timer time."""
    return KeyValueStore(sink, flush_interval=5, timer_factory=timers)


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

