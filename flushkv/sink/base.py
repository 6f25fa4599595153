"""Byte sink interface."""


class ByteSink:
    """
    Where a store's serialized contents live.

    read() is the initial-load path and is called once, before any
    mutation. write() receives the complete serialized store on every flush
    and replaces whatever was written before.
    """

    def read(self) -> bytes:
        """Return the persisted bytes, or b"" if nothing was persisted."""
        raise NotImplementedError

    def write(self, data: bytes) -> None:
        """Persist data, replacing the previous contents."""
        raise NotImplementedError
