"""
Timer Module

A timer is a single-shot, re-armable callback handle. The flush coordinator
needs only three things from it: enable it with a delay, disable it, and ask
whether it is currently pending. Periodic behaviour comes from the callback
re-enabling its own timer.

AsyncioTimer runs callbacks on the asyncio event loop, so they never run
concurrently with other code on that loop.
"""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Timer:
    """Interface for a re-armable single-shot timer."""

    def enable_timer(self, delay: float) -> None:
        """Schedule the callback to run once after delay seconds."""
        raise NotImplementedError

    def disable_timer(self) -> None:
        """Cancel a pending callback, if any."""
        raise NotImplementedError

    def enabled(self) -> bool:
        """Return True while a callback is pending."""
        raise NotImplementedError


# Builds a timer bound to the given callback
TimerFactory = Callable[[Callable[[], None]], Timer]


class AsyncioTimer(Timer):
    """
    Timer backed by loop.call_later().

    Usage:
        timer = AsyncioTimer(callback)
        timer.enable_timer(5.0)   # must be called with a running loop
        timer.enabled()           # True until the callback starts

    Attributes:
        callback: Called with no arguments when the timer fires
    """

    def __init__(
            self,
            callback: Callable[[], None],
            loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize the timer (disabled).

        Args:
            callback: Function to run when the timer fires
            loop: Event loop to schedule on (default: the running loop at
                the time enable_timer() is called)
        """
        self.callback = callback
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    def enable_timer(self, delay: float) -> None:
        # Re-enabling replaces any pending callback
        self.disable_timer()
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire)

    def disable_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def enabled(self) -> bool:
        return self._handle is not None

    def _fire(self) -> None:
        # Not enabled while the callback runs; the callback may re-enable
        self._handle = None
        self.callback()
