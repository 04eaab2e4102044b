"""Base64 transfer encoding with 76 column output lines."""

import base64
import binascii
from typing import BinaryIO

from ...models.line_break import Break
from .base import ChunkDecoder, Encoder, Transcoding, TransferEncodeError

# RFC 2045 limit on encoded line length
LINE_LENGTH = 76

_NOT_BASE64 = bytes(c for c in range(256) if c not in b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/=")


class Base64Encoder(Encoder):
    """
    Base64 encoder breaking output lines every 76 bytes.

    No line break follows the final line.
    """

    def __init__(self, sink: BinaryIO, lb: Break = Break.CRLF, line_length: int = LINE_LENGTH):
        super().__init__(sink)
        self.lb = lb
        self.line_length = line_length
        self._pending = b""
        self._column = 0

    def _emit(self, encoded: bytes) -> None:
        while encoded:
            if self._column == self.line_length:
                self.sink.write(self.lb.terminator)
                self._column = 0
            take = min(self.line_length - self._column, len(encoded))
            self.sink.write(encoded[:take])
            self._column += take
            encoded = encoded[take:]

    def write(self, data: bytes) -> int:
        if self.closed:
            raise TransferEncodeError("write to closed base64 encoder")
        self._pending += data
        usable = len(self._pending) // 3 * 3
        if usable:
            self._emit(base64.b64encode(self._pending[:usable]))
            self._pending = self._pending[usable:]
        return len(data)

    def flush_remainder(self) -> None:
        if self._pending:
            self._emit(base64.b64encode(self._pending))
            self._pending = b""


class Base64Decoder(ChunkDecoder):
    """Decodes base64, ignoring line breaks and any other stray bytes."""

    def __init__(self, source: BinaryIO):
        super().__init__(source)
        self._held = b""

    def _decode(self, data: bytes) -> bytes:
        try:
            return base64.b64decode(data)
        except binascii.Error as e:
            raise TransferEncodeError(f"invalid base64 body: {e}") from e

    def feed(self, data: bytes) -> bytes:
        self._held += data.translate(None, _NOT_BASE64)
        usable = len(self._held) // 4 * 4
        decoded = self._decode(self._held[:usable])
        self._held = self._held[usable:]
        return decoded

    def finish(self) -> bytes:
        held, self._held = self._held, b""
        if not held:
            return b""
        return self._decode(held + b"=" * (-len(held) % 4))


def base64_encoder(sink: BinaryIO, lb: Break = Break.CRLF) -> Encoder:
    return Base64Encoder(sink, lb)


def base64_decoder(reader: BinaryIO) -> BinaryIO:
    return Base64Decoder(reader)


BASE64 = Transcoding(encoder=base64_encoder, decoder=base64_decoder)
