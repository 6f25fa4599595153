"""
Key-Value Store Module

This module implements the in-memory mapping and its persistence policy.

KeyValueStoreBase holds the mapping and the mutation/lookup/iteration
operations. Every mutation is reported to a FlushCoordinator, which flushes
immediately when no periodic timer is armed and otherwise leaves the work
to the next timer tick. Subclasses decide what a flush does.

KeyValueStore is the concrete store: it bulk-loads from a ByteSink at
construction and writes its serialized mapping back to the same sink on
every flush.
"""

import logging
from enum import Enum, auto
from typing import Callable, Dict

from ..config.settings import settings
from ..protocol.parser import ContentsParser, validate_text
from ..protocol.results import ABSENT, Lookup, Present
from ..scheduling.timer import TimerFactory
from ..sink.base import ByteSink
from .flush import FlushCoordinator

logger = logging.getLogger(__name__)


class Iterate(Enum):
    """Returned by iterate() callbacks."""
    CONTINUE = auto()
    BREAK = auto()


IterateCallback = Callable[[str, str], Iterate]


class KeyValueStoreBase:
    """
    In-memory string-to-string mapping with flush-on-mutation policy.

    Operations:
    - add_or_update: Insert or overwrite a key (may flush)
    - remove: Delete a key if present (may flush)
    - get: Look up a key, returning Present(value) or ABSENT
    - iterate: Visit every entry until the callback returns Iterate.BREAK

    Not thread-safe. All calls, including timer callbacks, are expected to
    run on one thread (normally the asyncio event loop).

    Attributes:
        coordinator: The FlushCoordinator owning this store's timer
    """

    def __init__(self, flush_interval: float = None, timer_factory: TimerFactory = None):
        """
        Initialize an empty store and its flush timer.

        Args:
            flush_interval: Seconds between timer flushes; <= 0 means every
                mutation flushes immediately (default from settings)
            timer_factory: Timer implementation (default AsyncioTimer)
        """
        self._store: Dict[str, str] = {}
        self.coordinator = FlushCoordinator(
            self.flush,
            flush_interval=flush_interval,
            timer_factory=timer_factory,
        )

    def flush(self) -> None:
        """Persist the current mapping. Implemented by subclasses."""
        raise NotImplementedError

    def add_or_update(self, key: str, value: str) -> None:
        """
        Insert or overwrite the value for key.

        Flushes immediately if no periodic flush timer is armed.

        Raises:
            ValueError: If key or value contains lone surrogates and so
                could not be persisted exactly. The store is left unchanged.
        """
        validate_text(key)
        validate_text(value)
        self._store[key] = value
        self.coordinator.on_mutation()

    def remove(self, key: str) -> None:
        """
        Delete key if present. Removing a missing key is not an error.

        Flushes immediately if no periodic flush timer is armed, whether or
        not the key existed.
        """
        self._store.pop(key, None)
        self.coordinator.on_mutation()

    def get(self, key: str) -> Lookup:
        """
        Look up a key.

        Returns:
            Present(value) if the key exists, ABSENT otherwise
        """
        if key not in self._store:
            return ABSENT
        return Present(self._store[key])

    def iterate(self, callback: IterateCallback) -> None:
        """
        Call callback(key, value) for each entry, in no particular order.

        Iteration stops early when the callback returns Iterate.BREAK.

        The callback must not modify the store (add_or_update/remove). This
        is the caller's responsibility. When settings.VERIFY_ITERATION is on
        (the default, unless running under python -O) the store compares a
        snapshot taken before the traversal with the mapping afterwards and
        raises AssertionError on any difference.
        """
        if __debug__ and settings.VERIFY_ITERATION:
            store_before_iteration = dict(self._store)
            try:
                self._iterate(callback)
            finally:
                assert self._store == store_before_iteration, (
                    "Expected iterate to not modify the underlying store."
                )
        else:
            self._iterate(callback)

    def _iterate(self, callback: IterateCallback) -> None:
        # Callbacks see a stable snapshot of the entries
        for key, value in list(self._store.items()):
            if callback(key, value) is Iterate.BREAK:
                return

    def size(self) -> int:
        """Get the current number of keys in the store."""
        return len(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def close(self) -> None:
        """Tear down the flush timer. Does not flush."""
        self.coordinator.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class KeyValueStore(KeyValueStoreBase):
    """
    Store persisted to a ByteSink.

    At construction the sink is read once and parsed into the mapping. A
    malformed sink is not fatal: the error is logged, every pair decoded
    before it is kept, and loaded_cleanly is set to False so the caller can
    apply a stricter policy.

    Usage:
        store = KeyValueStore(FileSink("cache.dat"), flush_interval=0)
        store.add_or_update("host", "10.0.0.1")   # written to cache.dat now

    Attributes:
        sink: Where the serialized mapping is read from and written to
        parser: ContentsParser used for loading and flushing
        loaded_cleanly: False if the initial contents failed to parse
        flush_count: Number of flushes performed
    """

    def __init__(
            self,
            sink: ByteSink,
            flush_interval: float = None,
            timer_factory: TimerFactory = None,
    ):
        self.sink = sink
        self.parser = ContentsParser()
        self.flush_count = 0
        super().__init__(flush_interval=flush_interval, timer_factory=timer_factory)
        self.loaded_cleanly = self._load()

    def _load(self) -> bool:
        contents = self.sink.read()
        if not contents:
            return True

        ok = self.parser.parse_contents(contents, self._store)
        if ok:
            logger.info(f"Loaded {len(self._store)} entries ({len(contents)} bytes)")
        else:
            logger.warning(
                f"Store contents are corrupt, kept {len(self._store)} entries "
                f"decoded before the error: {self.parser.last_error.message}"
            )
        return ok

    def flush(self) -> None:
        """Serialize the mapping and write it to the sink."""
        data = self.parser.format_contents(self._store)
        self.sink.write(data)
        self.flush_count += 1
        logger.debug(f"Flushed {len(self._store)} entries ({len(data)} bytes)")
