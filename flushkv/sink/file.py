"""
File Byte Sink

Persists a store to a single file. Writes go to a temporary file in the
same directory which then replaces the target, so a crash mid-flush leaves
either the old contents or the new ones, never a torn file.
"""

import logging
import os
import tempfile

from .base import ByteSink

logger = logging.getLogger(__name__)


class FileSink(ByteSink):
    """
    Byte sink backed by a file on disk.

    Attributes:
        path: Location of the store file
    """

    def __init__(self, path: str):
        self.path = os.fspath(path)

    def read(self) -> bytes:
        """
        Read the whole file.

        Returns:
            The file contents, or b"" if the file does not exist yet.
            Other OS errors propagate.
        """
        try:
            with open(self.path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            logger.info(f"No store file at {self.path}, starting empty")
            return b""

    def write(self, data: bytes) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=".", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise
        logger.debug(f"Wrote {len(data)} bytes to {self.path}")
