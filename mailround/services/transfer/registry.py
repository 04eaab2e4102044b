"""Process-wide transfer-encoding registry and header-driven codec selection."""

import logging
from typing import BinaryIO, Optional

from ..header.base import FieldNotFoundError, TooManyFieldsError
from ..header.header import Header
from .as_is import AS_IS, AsIsEncoder
from .base import Encoder, Transcoding, TransferRegistry
from .base64_codec import BASE64
from .quoted_printable import QUOTED_PRINTABLE

logger = logging.getLogger(__name__)

IDENTITY_ENCODINGS = ("", "7bit", "8bit", "binary")


def new_default_transfer_registry() -> TransferRegistry:
    """Registry holding the five RFC 2045 encodings."""
    registry = TransferRegistry()
    for name in IDENTITY_ENCODINGS:
        registry.register(name, AS_IS)
    registry.register("quoted-printable", QUOTED_PRINTABLE)
    registry.register("base64", BASE64)
    return registry


_default_registry: Optional[TransferRegistry] = None


def default_transfer_registry() -> TransferRegistry:
    """Registry used when none is passed explicitly."""
    global _default_registry
    if _default_registry is None:
        _default_registry = new_default_transfer_registry()
    return _default_registry


def set_default_transfer_registry(registry: TransferRegistry) -> None:
    """Replace the process-wide registry."""
    global _default_registry
    _default_registry = registry


def _is_multipart(header: Header) -> bool:
    try:
        return header.get_type() == "multipart"
    except (FieldNotFoundError, TooManyFieldsError, ValueError):
        return False


def _transcoding_for(header: Header, registry: Optional[TransferRegistry]) -> Optional[Transcoding]:
    if _is_multipart(header):
        return None

    try:
        cte = header.get_transfer_encoding()
    except FieldNotFoundError:
        return None
    except TooManyFieldsError as e:
        cte = e.value

    transcoding = (registry or default_transfer_registry()).lookup(cte)
    if transcoding is None:
        logger.warning("Unknown Content-Transfer-Encoding %r, treating body as is", cte)
    return transcoding


def apply_transfer_decoding(
    header: Header, reader: BinaryIO, registry: Optional[TransferRegistry] = None
) -> BinaryIO:
    """
    Wrap reader so that it yields the decoded body.

    Multipart bodies are never decoded as a whole. Without a
    Content-Transfer-Encoding (or with an unknown one) the reader is
    returned unchanged.
    """
    transcoding = _transcoding_for(header, registry)
    if transcoding is None:
        return reader
    return transcoding.decoder(reader)


def apply_transfer_encoding(
    header: Header, sink: BinaryIO, registry: Optional[TransferRegistry] = None
) -> Encoder:
    """
    Wrap sink in the encoder selected by the header.

    The caller must close() the returned encoder to flush it.
    """
    transcoding = _transcoding_for(header, registry)
    if transcoding is None:
        return AsIsEncoder(sink)
    return transcoding.encoder(sink, header.break_)
