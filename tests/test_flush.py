"""
Tests for the Flush Coordinator

These tests verify when the flush action runs:
- Armed: mutations are deferred to the next timer tick
- Disarmed: every mutation flushes exactly once
- Timer ticks flush and re-arm

Run with: python -m pytest tests/test_flush.py -v
"""

import pytest

from flushkv.cache.flush import FlushCoordinator


class TestArming:
    """Test the state chosen at construction."""

    def test_positive_interval_arms(self, armed_coordinator: FlushCoordinator, timers):
        """Test a positive interval enables the timer immediately."""
        assert armed_coordinator.armed is True
        assert timers.timer.delay == 5

    @pytest.mark.parametrize("interval", [0, -1])
    def test_non_positive_interval_disarms(self, flush_counter, timers, interval):
        """Test zero or negative intervals never enable the timer."""
        coordinator = FlushCoordinator(flush_counter, flush_interval=interval, timer_factory=timers)

        assert coordinator.armed is False
        assert timers.timer.enable_calls == []

    def test_one_timer_per_coordinator(self, armed_coordinator: FlushCoordinator, timers):
        """Test the coordinator owns a single timer."""
        assert len(timers.timers) == 1

    def test_construction_does_not_flush(self, armed_coordinator, disarmed_coordinator, flush_counter):
        """Test neither state flushes on construction."""
        assert flush_counter.calls == 0


class TestMutation:
    """Test on_mutation()."""

    def test_disarmed_flushes_each_mutation(self, disarmed_coordinator: FlushCoordinator, flush_counter):
        """Test one flush per mutation when no timer is pending."""
        for expected in range(1, 4):
            disarmed_coordinator.on_mutation()
            assert flush_counter.calls == expected

    def test_disarmed_flush_does_not_arm(self, disarmed_coordinator: FlushCoordinator):
        """Test a catch-up flush is not a re-arm."""
        disarmed_coordinator.on_mutation()
        assert disarmed_coordinator.armed is False

    def test_armed_defers(self, armed_coordinator: FlushCoordinator, flush_counter):
        """Test mutations while armed do not flush."""
        for _ in range(10):
            armed_coordinator.on_mutation()
        assert flush_counter.calls == 0


class TestTimerFire:
    """Test the recurring timer."""

    def test_fire_flushes_and_rearms(self, armed_coordinator: FlushCoordinator, timers, flush_counter):
        """Test a tick flushes once and re-enables with the same interval."""
        timers.timer.fire()

        assert flush_counter.calls == 1
        assert armed_coordinator.armed is True
        assert timers.timer.enable_calls == [5, 5]

    def test_repeated_fires(self, armed_coordinator: FlushCoordinator, timers, flush_counter):
        """Test every tick flushes."""
        for _ in range(3):
            timers.timer.fire()
        assert flush_counter.calls == 3

    def test_disarmed_during_flush(self, timers):
        """Test the timer reports disabled while the flush runs."""
        seen = []
        coordinator = None

        def flush():
            seen.append(coordinator.armed)

        coordinator = FlushCoordinator(flush, flush_interval=1, timer_factory=timers)
        timers.timer.fire()

        assert seen == [False]
        assert coordinator.armed is True

    def test_mutation_during_flush_flushes_inline(self, timers):
        """Test a mutation observed mid-tick is flushed synchronously."""
        calls = []
        coordinator = None

        def flush():
            calls.append("flush")
            if len(calls) == 1:
                coordinator.on_mutation()

        coordinator = FlushCoordinator(flush, flush_interval=1, timer_factory=timers)
        timers.timer.fire()

        assert calls == ["flush", "flush"]

    def test_rearms_when_flush_raises(self, timers):
        """Test a failing flush still leaves the timer armed for the next tick."""
        def flush():
            raise OSError("disk full")

        coordinator = FlushCoordinator(flush, flush_interval=1, timer_factory=timers)
        with pytest.raises(OSError):
            timers.timer.fire()

        assert coordinator.armed is True


class TestClose:
    """Test close()."""

    def test_close_disables_timer(self, armed_coordinator: FlushCoordinator):
        """Test close() disarms."""
        armed_coordinator.close()
        assert armed_coordinator.armed is False

    def test_closed_coordinator_does_not_rearm(self, timers, flush_counter):
        """Test a tick that runs after close() does not re-enable the timer."""
        coordinator = FlushCoordinator(flush_counter, flush_interval=1, timer_factory=timers)

        def close_then_count():
            coordinator.close()
            flush_counter()

        coordinator.flush_action = close_then_count
        timers.timer.fire()

        assert flush_counter.calls == 1
        assert coordinator.armed is False
