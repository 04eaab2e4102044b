"""Identity codec for 7bit, 8bit and binary bodies."""

from typing import BinaryIO

from ...models.line_break import Break
from .base import Encoder, Transcoding


class AsIsEncoder(Encoder):
    """Passes bytes straight through to the sink."""

    def write(self, data: bytes) -> int:
        self.sink.write(data)
        return len(data)


def as_is_encoder(sink: BinaryIO, lb: Break = Break.CRLF) -> Encoder:
    return AsIsEncoder(sink)


def as_is_decoder(reader: BinaryIO) -> BinaryIO:
    return reader


AS_IS = Transcoding(encoder=as_is_encoder, decoder=as_is_decoder)
