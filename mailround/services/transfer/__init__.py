"""Content-Transfer-Encoding codecs"""

from .as_is import AS_IS, AsIsEncoder
from .base import ChunkDecoder, Encoder, Transcoding, TransferEncodeError, TransferRegistry
from .base64_codec import BASE64, Base64Decoder, Base64Encoder
from .quoted_printable import QUOTED_PRINTABLE, QuotedPrintableDecoder, QuotedPrintableEncoder
from .registry import (
    apply_transfer_decoding,
    apply_transfer_encoding,
    default_transfer_registry,
    new_default_transfer_registry,
    set_default_transfer_registry,
)

__all__ = [
    "AS_IS",
    "AsIsEncoder",
    "ChunkDecoder",
    "Encoder",
    "Transcoding",
    "TransferEncodeError",
    "TransferRegistry",
    "BASE64",
    "Base64Decoder",
    "Base64Encoder",
    "QUOTED_PRINTABLE",
    "QuotedPrintableDecoder",
    "QuotedPrintableEncoder",
    "apply_transfer_decoding",
    "apply_transfer_encoding",
    "default_transfer_registry",
    "new_default_transfer_registry",
    "set_default_transfer_registry",
]
