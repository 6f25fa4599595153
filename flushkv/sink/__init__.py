"""Byte sink module for flushkv."""

from .base import ByteSink
from .file import FileSink
from .memory import MemorySink

__all__ = ["ByteSink", "FileSink", "MemorySink"]
