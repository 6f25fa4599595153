"""In-memory byte sink."""

from typing import List

from .base import ByteSink


class MemorySink(ByteSink):
    """
    Keeps the persisted bytes in memory.

    Every write is also appended to writes, so callers can see how many
    flushes reached the sink and what each one contained.
    """

    def __init__(self, initial: bytes = b""):
        self.data = bytes(initial)
        self.writes: List[bytes] = []

    def read(self) -> bytes:
        return self.data

    def write(self, data: bytes) -> None:
        self.data = bytes(data)
        self.writes.append(self.data)
