"""Transfer-encoding codec interfaces and the codec registry."""

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Callable, Dict, List, Optional

from ...models.line_break import Break


class TransferEncodeError(Exception):
    """Raised when a body cannot be encoded or decoded with its transfer encoding."""

    pass


class Encoder(ABC):
    """
    Writer that transfer-encodes bytes into a sink.

    Encoders buffer partial input, so close() must be called to flush the
    remainder. Closing an encoder never closes the sink.
    """

    def __init__(self, sink: BinaryIO):
        self.sink = sink
        self.closed = False

    @abstractmethod
    def write(self, data: bytes) -> int:
        """
        Encode data into the sink.

        Returns:
            Number of input bytes consumed (always len(data))
        """
        pass

    def flush_remainder(self) -> None:
        """Write out anything still buffered."""

    def close(self) -> None:
        if not self.closed:
            self.flush_remainder()
            self.closed = True

    def __enter__(self) -> "Encoder":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ChunkDecoder(io.RawIOBase):
    """
    Reader that decodes its source a chunk at a time.

    Subclasses implement feed() and finish(); feed() may hold back a tail
    of input that cannot be decoded until more arrives.
    """

    chunk_size = 8192

    def __init__(self, source: BinaryIO):
        super().__init__()
        self._source = source
        self._decoded = b""
        self._eof = False

    def readable(self) -> bool:
        return True

    @abstractmethod
    def feed(self, data: bytes) -> bytes:
        """Decode as much of data (plus held back input) as possible."""
        pass

    @abstractmethod
    def finish(self) -> bytes:
        """Decode whatever input is still held back."""
        pass

    def readinto(self, b) -> int:
        while not self._decoded and not self._eof:
            chunk = self._source.read(self.chunk_size)
            if not chunk:
                self._eof = True
                self._decoded = self.finish()
            else:
                self._decoded = self.feed(chunk)

        n = min(len(b), len(self._decoded))
        b[:n] = self._decoded[:n]
        self._decoded = self._decoded[n:]
        return n


EncoderFactory = Callable[[BinaryIO, Break], Encoder]
DecoderFactory = Callable[[BinaryIO], BinaryIO]


@dataclass(frozen=True)
class Transcoding:
    """
    A transfer encoding's encoder and decoder.

    Attributes:
        encoder: Builds an Encoder writing into a sink, given the line break
        decoder: Wraps an encoded reader in a reader of decoded bytes
    """

    encoder: EncoderFactory
    decoder: DecoderFactory


class TransferRegistry:
    """Maps Content-Transfer-Encoding values (case-insensitive) to codecs."""

    def __init__(self):
        self._codecs: Dict[str, Transcoding] = {}

    def register(self, name: str, transcoding: Transcoding) -> None:
        self._codecs[name.strip().lower()] = transcoding

    def unregister(self, name: str) -> None:
        self._codecs.pop(name.strip().lower(), None)

    def lookup(self, name: str) -> Optional[Transcoding]:
        return self._codecs.get(name.strip().lower())

    def names(self) -> List[str]:
        return sorted(self._codecs)

    def copy(self) -> "TransferRegistry":
        registry = TransferRegistry()
        registry._codecs = dict(self._codecs)
        return registry
