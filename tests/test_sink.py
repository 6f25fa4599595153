"""
Tests for Byte Sinks

These tests verify FileSink and MemorySink, and a file-backed store.

Run with: python -m pytest tests/test_sink.py -v
"""

import os

import pytest

from flushkv.cache.store import KeyValueStore
from flushkv.protocol.results import Present
from flushkv.sink.file import FileSink
from flushkv.sink.memory import MemorySink


class TestMemorySink:
    """Test MemorySink."""

    def test_initial_contents(self):
        """Test read() returns the initial bytes."""
        assert MemorySink(b"abc").read() == b"abc"

    def test_write_replaces_and_records(self):
        """Test each write replaces data and is recorded."""
        sink = MemorySink(b"old")
        sink.write(b"one")
        sink.write(b"two")

        assert sink.read() == b"two"
        assert sink.writes == [b"one", b"two"]


class TestFileSink:
    """Test FileSink."""

    def test_missing_file_reads_empty(self, tmp_path):
        """Test a store file that does not exist yet."""
        assert FileSink(tmp_path / "missing.dat").read() == b""

    def test_write_then_read(self, tmp_path):
        """Test bytes are persisted exactly."""
        sink = FileSink(tmp_path / "store.dat")
        sink.write(b"1\nA1\nB")

        assert sink.read() == b"1\nA1\nB"
        assert (tmp_path / "store.dat").read_bytes() == b"1\nA1\nB"

    def test_write_replaces(self, tmp_path):
        """Test a shorter write does not leave old bytes behind."""
        sink = FileSink(tmp_path / "store.dat")
        sink.write(b"a long first write")
        sink.write(b"short")

        assert sink.read() == b"short"

    def test_no_temporary_files_left(self, tmp_path):
        """Test the atomic write cleans up after itself."""
        sink = FileSink(tmp_path / "store.dat")
        sink.write(b"data")

        assert os.listdir(tmp_path) == ["store.dat"]

    def test_read_error_propagates(self, tmp_path):
        """Test errors other than a missing file are not swallowed."""
        with pytest.raises(IsADirectoryError):
            FileSink(tmp_path).read()


@pytest.mark.integration
class TestFileBackedStore:
    """Test a KeyValueStore persisted to a file."""

    def test_survives_restart(self, tmp_path, timers):
        """Test a new store on the same file sees earlier mutations."""
        path = tmp_path / "cache.dat"

        with KeyValueStore(FileSink(path), flush_interval=0, timer_factory=timers) as first:
            first.add_or_update("upstream", "10.0.0.1:8080")
            first.add_or_update("drained", "true")
            first.remove("drained")

        with KeyValueStore(FileSink(path), flush_interval=0, timer_factory=timers) as second:
            assert second.loaded_cleanly
            assert second.size() == 1
            assert second.get("upstream") == Present("10.0.0.1:8080")

    def test_corrupt_file_recovers_prefix(self, tmp_path, timers):
        """Test a truncated file loads its valid leading pairs."""
        path = tmp_path / "cache.dat"
        path.write_bytes(b"1\nA1\nB1\nC5\nxy")

        kv = KeyValueStore(FileSink(path), flush_interval=0, timer_factory=timers)

        assert not kv.loaded_cleanly
        assert kv.get("A") == Present("B")
        assert "C" not in kv
