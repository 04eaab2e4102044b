"""Byte stream helpers shared by the parser and serializers."""

import io
from typing import BinaryIO, Optional, Union

ByteSource = Union[bytes, bytearray, memoryview, str, BinaryIO]


class Remainder(io.RawIOBase):
    """
    Reader that returns bytes already buffered, then the unread rest of a source.

    The parser reads the header in chunks; whatever it read past the header
    is handed back through this reader so the body is never read twice.
    """

    def __init__(self, prefix: bytes, source: Optional[BinaryIO] = None):
        super().__init__()
        self._prefix = prefix
        self._source = source

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self._prefix:
            n = min(len(b), len(self._prefix))
            b[:n] = self._prefix[:n]
            self._prefix = self._prefix[n:]
            return n

        if self._source is None:
            return 0
        data = self._source.read(len(b))
        if not data:
            return 0
        n = len(data)
        b[:n] = data
        return n


class CountingWriter:
    """Sink wrapper counting the bytes written through it."""

    def __init__(self, sink: BinaryIO):
        self.sink = sink
        self.count = 0

    def write(self, data: bytes) -> int:
        self.sink.write(data)
        self.count += len(data)
        return len(data)


def as_reader(source: ByteSource) -> BinaryIO:
    """
    Turn bytes, text or a binary file object into a readable stream.

    Text is encoded as UTF-8.

    Raises:
        TypeError: If source is none of the supported types
    """
    if isinstance(source, str):
        return io.BytesIO(source.encode("utf-8"))
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    if hasattr(source, "read"):
        return source
    raise TypeError(f"Cannot read message bytes from {type(source).__name__}")


def read_all(reader: BinaryIO, chunk_size: int = 65536) -> bytes:
    """Read a stream to the end."""
    chunks = []
    while True:
        chunk = reader.read(chunk_size)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def copy_stream(reader: BinaryIO, writer, chunk_size: int = 65536) -> int:
    """
    Copy everything from reader to writer.

    Returns:
        Number of bytes copied
    """
    total = 0
    while True:
        chunk = reader.read(chunk_size)
        if not chunk:
            break
        writer.write(chunk)
        total += len(chunk)
    return total
