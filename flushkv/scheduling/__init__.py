"""Scheduling module for flushkv."""

from .timer import AsyncioTimer, Timer, TimerFactory

__all__ = ["AsyncioTimer", "Timer", "TimerFactory"]
