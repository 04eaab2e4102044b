"""
Message parser.

Parsing runs in up to three phases. The source is read in chunks until the
end of the header is found and the header is parsed; the remaining bytes
become the body of an Opaque. If the Content-Type names a multipart (or
message) type with a boundary, the body is then cut at the boundary and
each piece parsed the same way, down to the configured depth. Finally, when
decode_transfer_encoding is set, leaf bodies are wrapped in the decoder for
their Content-Transfer-Encoding.

Problems that still leave a usable result (junk before the first field, a
missing boundary, a child that will not parse) are collected; once parsing
is done they are raised together with the best-effort result attached.
"""

import io
import logging
from typing import BinaryIO, List, Optional

from ...config.parser_config import ParserConfig, default_parser_config
from ...models.line_break import Break
from ...utils.io_utils import ByteSource, Remainder, as_reader, read_all
from ..header.base import BadStartError, FieldNotFoundError, TooManyFieldsError
from ..header.charset import CharsetRegistry
from ..header.header import Header
from ..header.lines import find_terminator, leading_break, split_header
from ..transfer.registry import apply_transfer_decoding
from .base import (
    EmptyPartError,
    HeaderTooLargeError,
    NoBoundaryError,
    ParseError,
    Part,
    PartTooLargeError,
)
from .boundary import split_multipart
from .multipart import Multipart
from .opaque import Opaque

logger = logging.getLogger(__name__)

_DECOMPOSABLE_TYPES = ("multipart", "message")

# longest header/body terminator
_LOOKAHEAD = 4


def _header_complete(buf: bytes) -> bool:
    """True once more input cannot change where the header ends."""
    if len(buf) >= 2 and leading_break(buf) is not None:
        return True
    found = find_terminator(buf)
    return found is not None and found[0] + _LOOKAHEAD <= len(buf)


def _read_header(reader: BinaryIO, config: ParserConfig):
    """
    Read from reader until the end of the header is known.

    Returns:
        Tuple of (bytes read so far, True if the reader is exhausted)

    Raises:
        HeaderTooLargeError: If the header exceeds max_header_length
    """
    buf = b""
    while True:
        chunk = reader.read(config.chunk_size)
        if not chunk:
            return buf, True
        buf += chunk
        if _header_complete(buf):
            return buf, False
        if config.max_header_length and len(buf) > config.max_header_length:
            raise HeaderTooLargeError(
                f"no end of header within {config.max_header_length} bytes"
            )


def _parse_opaque(
    reader: BinaryIO,
    config: ParserConfig,
    charsets: Optional[CharsetRegistry],
    errors: List[Exception],
) -> Opaque:
    buf, eof = _read_header(reader, config)
    split = split_header(buf)
    if config.max_header_length and len(split.header) > config.max_header_length:
        raise HeaderTooLargeError(
            f"header is {len(split.header)} bytes, limit is {config.max_header_length}"
        )

    try:
        header = Header.parse(split.header, split.lb, charsets)
    except BadStartError as e:
        errors.append(e)
        header = e.header
    logger.debug("Parsed header of %d fields, break %s", len(header), split.lb.name)

    if split.body is None:
        header.set_terminated(False)
        return Opaque(header, None, encoded=True)

    body: BinaryIO
    if eof:
        body = io.BytesIO(split.body)
    elif isinstance(reader, io.BytesIO):
        # already in memory, keep the body seekable
        body = io.BytesIO(split.body + reader.read())
    else:
        body = Remainder(split.body, reader)
    return Opaque(header, body, encoded=True)


def _decode_leaf(opaque: Opaque, config: ParserConfig) -> Part:
    if not config.decode_transfer_encoding or not opaque.has_body():
        return opaque
    reader = apply_transfer_decoding(opaque.header, opaque.get_reader())
    return Opaque(opaque.header, reader, encoded=False)


def _media_type_of(header: Header):
    """Content-Type of header, or None if it is missing or unreadable."""
    try:
        return header.get_content_type()
    except TooManyFieldsError as e:
        logger.warning("Multiple Content-Type fields, using the first")
        return e.value
    except (FieldNotFoundError, ValueError):
        return None


def _raw_part(data: bytes) -> Opaque:
    """Unparsed child kept so that it is written back unchanged."""
    header = Header(lb=Break.MEH)
    header.set_terminated(False)
    return Opaque(header, io.BytesIO(data), encoded=True)


def _parse_child(
    data: bytes,
    config: ParserConfig,
    charsets: Optional[CharsetRegistry],
    errors: List[Exception],
) -> Part:
    if not data:
        errors.append(EmptyPartError("multipart body contains an empty part"))
        return _raw_part(data)
    if config.max_part_length and len(data) > config.max_part_length:
        errors.append(
            PartTooLargeError(f"part is {len(data)} bytes, limit is {config.max_part_length}")
        )
        return _raw_part(data)

    child_errors: List[Exception] = []
    try:
        child = _parse_opaque(io.BytesIO(data), config, charsets, child_errors)
    except HeaderTooLargeError as e:
        errors.append(e)
        return _raw_part(data)

    if any(isinstance(e, BadStartError) for e in child_errors):
        errors.extend(child_errors)
        return _raw_part(data)

    errors.extend(child_errors)
    return _parse_multipart(child, config, charsets, errors)


def _parse_multipart(
    opaque: Opaque,
    config: ParserConfig,
    charsets: Optional[CharsetRegistry],
    errors: List[Exception],
) -> Part:
    if not config.parses_multipart:
        return _decode_leaf(opaque, config)

    content_type = _media_type_of(opaque.header)
    if content_type is None or content_type.type not in _DECOMPOSABLE_TYPES:
        return _decode_leaf(opaque, config)

    boundary = content_type.boundary
    if not boundary:
        if content_type.type == "multipart":
            logger.warning("Content-Type %s has no boundary", content_type.media_type)
            errors.append(NoBoundaryError(opaque))
        return opaque

    data = read_all(opaque.get_reader()) if opaque.has_body() else b""
    split = split_multipart(data, boundary, opaque.header.break_)
    logger.debug("Split %s body into %d parts", content_type.media_type, len(split.parts))

    child_config = config.descend()
    parts = [_parse_child(piece, child_config, charsets, errors) for piece in split.parts]
    return Multipart(opaque.header, parts, split.prefix, split.suffix, boundary)


def _result(errors: List[Exception], message: Part) -> Part:
    if not errors:
        return message
    if len(errors) == 1 and isinstance(errors[0], NoBoundaryError):
        raise NoBoundaryError(message)
    raise ParseError(errors, message)


def parse_opaque(
    source: ByteSource,
    config: Optional[ParserConfig] = None,
    charsets: Optional[CharsetRegistry] = None,
) -> Opaque:
    """
    Parse the header of a message and leave its body unread.

    Args:
        source: Message bytes, text or a binary stream
        config: Parser options (process default if None)
        charsets: Registry for encoded words (process default if None)

    Returns:
        Opaque message whose reader yields the undecoded body

    Raises:
        HeaderTooLargeError: If no end of header is found within the limit
        ParseError: If junk precedes the first field; the message is attached
    """
    config = config or default_parser_config()
    errors: List[Exception] = []
    opaque = _parse_opaque(as_reader(source), config, charsets, errors)
    _result(errors, opaque)
    return opaque


def parse_multipart(
    opaque: Opaque,
    config: Optional[ParserConfig] = None,
    charsets: Optional[CharsetRegistry] = None,
) -> Part:
    """
    Break an opaque message down into sub-parts where its Content-Type allows.

    The opaque body is consumed. Messages that are not multipart are
    returned unchanged.

    Args:
        opaque: Message from parse_opaque()
        config: Parser options; max_depth limits the nesting decomposed
        charsets: Registry for encoded words in child headers

    Returns:
        Multipart, or the given Opaque

    Raises:
        NoBoundaryError: If a multipart Content-Type has no boundary; the
            opaque message is attached
        ParseError: If children failed to parse; the best-effort tree is attached
    """
    config = config or default_parser_config()
    errors: List[Exception] = []
    message = _parse_multipart(opaque, config, charsets, errors)
    return _result(errors, message)


def parse(
    source: ByteSource,
    config: Optional[ParserConfig] = None,
    charsets: Optional[CharsetRegistry] = None,
) -> Part:
    """
    Parse a message into a tree of parts.

    Unmodified, the result writes back exactly the bytes that were read.

    Args:
        source: Message bytes, text or a binary stream
        config: Parser options (process default if None)
        charsets: Registry for encoded words (process default if None)

    Returns:
        Opaque or Multipart

    Raises:
        HeaderTooLargeError: If the top-level header exceeds the limit
        NoBoundaryError: If the only problem is a multipart Content-Type
            without a boundary; the opaque message is attached
        ParseError: For any other recoverable problems; the best-effort
            tree is attached

    Examples:
        >>> msg = parse(b"Subject: test\\n\\nHello")
        >>> msg.get_header().get_subject()
        'test'
    """
    config = config or default_parser_config()
    errors: List[Exception] = []
    opaque = _parse_opaque(as_reader(source), config, charsets, errors)
    message = _parse_multipart(opaque, config, charsets, errors)
    return _result(errors, message)
