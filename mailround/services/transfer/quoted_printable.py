"""Quoted-printable transfer encoding."""

import binascii
from typing import BinaryIO, List

from ...models.line_break import Break
from .base import ChunkDecoder, Encoder, Transcoding, TransferEncodeError


def _encode_line(content: bytes, lb: Break) -> bytes:
    # content has no hard line breaks; every newline in the output is a soft break
    encoded = binascii.b2a_qp(content, quotetabs=False, istext=False)
    if lb.terminator != b"\n":
        encoded = encoded.replace(b"\n", lb.terminator)
    return encoded


class QuotedPrintableEncoder(Encoder):
    """
    Quoted-printable encoder that keeps the input's hard line breaks.

    Each input line is encoded on its own and followed by the line break it
    had, so CRLF and LF bodies both survive a round trip.
    """

    def __init__(self, sink: BinaryIO, lb: Break = Break.CRLF):
        super().__init__(sink)
        self.lb = lb
        self._pending = b""

    def write(self, data: bytes) -> int:
        if self.closed:
            raise TransferEncodeError("write to closed quoted-printable encoder")
        self._pending += data
        end = self._pending.rfind(b"\n") + 1
        if end:
            complete, self._pending = self._pending[:end], self._pending[end:]
            out: List[bytes] = []
            for line in complete.splitlines(keepends=True):
                if line.endswith(b"\r\n"):
                    out.append(_encode_line(line[:-2], self.lb) + b"\r\n")
                elif line.endswith(b"\n"):
                    out.append(_encode_line(line[:-1], self.lb) + b"\n")
                else:
                    # a bare CR that splitlines() treated as a line end
                    out.append(_encode_line(line, self.lb))
            self.sink.write(b"".join(out))
        return len(data)

    def flush_remainder(self) -> None:
        if self._pending:
            self.sink.write(_encode_line(self._pending, self.lb))
            self._pending = b""


class QuotedPrintableDecoder(ChunkDecoder):
    """Decodes quoted-printable a line at a time."""

    def __init__(self, source: BinaryIO):
        super().__init__(source)
        self._held = b""

    def _decode(self, data: bytes) -> bytes:
        try:
            return binascii.a2b_qp(data)
        except binascii.Error as e:
            raise TransferEncodeError(f"invalid quoted-printable body: {e}") from e

    def feed(self, data: bytes) -> bytes:
        self._held += data
        end = self._held.rfind(b"\n") + 1
        if not end:
            return b""
        complete, self._held = self._held[:end], self._held[end:]
        return self._decode(complete)

    def finish(self) -> bytes:
        held, self._held = self._held, b""
        return self._decode(held) if held else b""


def quoted_printable_encoder(sink: BinaryIO, lb: Break = Break.CRLF) -> Encoder:
    return QuotedPrintableEncoder(sink, lb)


def quoted_printable_decoder(reader: BinaryIO) -> BinaryIO:
    return QuotedPrintableDecoder(reader)


QUOTED_PRINTABLE = Transcoding(encoder=quoted_printable_encoder, decoder=quoted_printable_decoder)
