"""
Flush Coordinator Module

Decides when a store's flush action runs.

States:
    Armed:    the recurring timer is pending. Mutations are not flushed
              individually; the next tick flushes everything at once.
    Disarmed: no timer is pending (flush_interval <= 0, or the coordinator
              was closed). Every mutation is flushed immediately.

A timer tick flushes and then re-enables the timer for the same interval.
A mutation seen while disarmed flushes once but never arms the timer.
"""

import logging
from typing import Callable

from ..config.settings import settings
from ..scheduling.timer import AsyncioTimer, Timer, TimerFactory

logger = logging.getLogger(__name__)


class FlushCoordinator:
    """
    Owns the flush timer of one store.

    Usage:
        coordinator = FlushCoordinator(store.flush, flush_interval=5.0)
        coordinator.on_mutation()   # flushes now only if disarmed
        coordinator.close()         # tears the timer down

    Attributes:
        flush_action: Called with no arguments to persist the store
        flush_interval: Seconds between timer flushes (<= 0 disables)
    """

    def __init__(
            self,
            flush_action: Callable[[], None],
            flush_interval: float = None,
            timer_factory: TimerFactory = None,
    ):
        """
        Create the timer and arm it if flush_interval is positive.

        Args:
            flush_action: Function performing the flush
            flush_interval: Seconds between flushes (default from
                settings.FLUSH_INTERVAL)
            timer_factory: Builds the timer from a callback (default:
                AsyncioTimer, which needs a running event loop to arm)
        """
        self.flush_action = flush_action
        self.flush_interval = (
            flush_interval if flush_interval is not None else settings.FLUSH_INTERVAL
        )
        factory = timer_factory if timer_factory is not None else AsyncioTimer
        self._closed = False
        self._timer: Timer = factory(self._on_timer)

        if self.flush_interval > 0:
            self._timer.enable_timer(self.flush_interval)
            logger.debug(f"Flush timer armed every {self.flush_interval}s")

    @property
    def armed(self) -> bool:
        """True while the recurring timer is pending."""
        return self._timer.enabled()

    def on_mutation(self) -> None:
        """Flush immediately unless a timer tick is already pending."""
        if not self._timer.enabled():
            self.flush_action()

    def close(self) -> None:
        """Disable the timer. A closed coordinator never re-arms."""
        self._closed = True
        self._timer.disable_timer()

    def _on_timer(self) -> None:
        logger.debug("Flush timer fired")
        try:
            self.flush_action()
        finally:
            if not self._closed:
                self._timer.enable_timer(self.flush_interval)
