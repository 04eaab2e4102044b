"""Builder for opaque and multipart messages."""

import io
import logging
from enum import Enum
from typing import BinaryIO, List, Optional

from ...config.parser_config import default_parser_config
from ...models.param_value import ParameterNotFoundError
from ..header.base import FieldNotFoundError
from ..header.header import Header
from .base import (
    ModeUnsetError,
    MultipartError,
    OpaqueBufferError,
    Part,
    PartsBufferError,
    ParsesAsNotMultipartError,
)
from .boundary import generate_safe_boundary
from .multipart import Multipart
from .opaque import Opaque
from .parser import parse_multipart

logger = logging.getLogger(__name__)

DEFAULT_MULTIPART_CONTENT_TYPE = "multipart/mixed"


class BufferMode(Enum):
    """What a Buffer has been used for so far."""

    UNSET = "unset"
    OPAQUE = "opaque"
    MULTIPART = "multipart"


class Buffer(Part):
    """
    Build a message either from bytes or from sub-parts.

    Writing bytes with write() puts the buffer in opaque mode; adding parts
    with add() puts it in multipart mode. The modes cannot be mixed. Either
    way, opaque() and multipart() produce a finished message, and both may
    be called any number of times; each call returns a copy of the header.
    In multipart mode a missing Content-Type and boundary are filled in on
    the builder's own header the first time they are needed, so every
    later result and every clone uses the same boundary.

    The buffer is itself a Part, so it can be added to another buffer or
    written out directly with write_to().

    Examples:
        >>> buf = Buffer()
        >>> buf.header.set_subject("Hello")
        >>> buf.header.set_media_type("text/plain")
        >>> buf.write(b"Hi there")
        8
        >>> bytes(buf)
        b'Subject: Hello\\nContent-type: text/plain\\n\\nHi there'
    """

    def __init__(self, header: Optional[Header] = None):
        self.header = header if header is not None else Header()
        self._mode = BufferMode.UNSET
        self._buf = io.BytesIO()
        self._parts: List[Part] = []
        self._encoded = False

    @property
    def mode(self) -> BufferMode:
        return self._mode

    def set_mode(self, mode: BufferMode) -> None:
        """
        Choose the mode before writing anything, e.g. for an empty body.

        Raises:
            OpaqueBufferError: If switching an opaque buffer to multipart
            PartsBufferError: If switching a multipart buffer to opaque
        """
        if mode is BufferMode.OPAQUE:
            self._init_opaque()
        elif mode is BufferMode.MULTIPART:
            self._init_parts()

    def set_encoded(self, encoded: bool) -> None:
        """
        Declare whether the written bytes are already transfer encoded.

        Bytes are assumed to be decoded unless told otherwise. Without
        meaning in multipart mode.
        """
        self._encoded = encoded

    def _init_opaque(self) -> None:
        if self._mode is BufferMode.MULTIPART:
            raise PartsBufferError("buffer already holds parts")
        self._mode = BufferMode.OPAQUE

    def _init_parts(self) -> None:
        if self._mode is BufferMode.OPAQUE:
            raise OpaqueBufferError("buffer already holds bytes")
        self._mode = BufferMode.MULTIPART

    def write(self, data: bytes) -> int:
        """
        Append body bytes.

        Raises:
            PartsBufferError: If parts were already added
        """
        self._init_opaque()
        return self._buf.write(data)

    def add(self, *parts: Part) -> None:
        """
        Append sub-parts.

        Raises:
            OpaqueBufferError: If bytes were already written
        """
        self._init_parts()
        self._parts.extend(parts)

    def _prepare_for_multipart_output(self) -> None:
        header = self.header
        try:
            header.get_media_type()
        except FieldNotFoundError:
            header.set_media_type(DEFAULT_MULTIPART_CONTENT_TYPE)

        try:
            header.get_boundary()
        except ParameterNotFoundError:
            for part in self._parts:
                if isinstance(part, Opaque):
                    part.read_body()
            boundary = generate_safe_boundary(bytes(part) for part in self._parts)
            logger.debug("Generated multipart boundary %s", boundary)
            header.set_boundary(boundary)

    def opaque(self) -> Opaque:
        """
        Return the message as an Opaque.

        In multipart mode the parts are serialized into the body, after a
        Content-Type and boundary have been filled in when missing.

        Raises:
            ModeUnsetError: If nothing was written or added
        """
        if self._mode is BufferMode.MULTIPART:
            self._prepare_for_multipart_output()
        header = self.header.clone()
        if self._mode is BufferMode.OPAQUE:
            return Opaque(header, io.BytesIO(self._buf.getvalue()), self._encoded)
        if self._mode is BufferMode.MULTIPART:
            body = io.BytesIO()
            if self._parts:
                Multipart(header, self._parts, b"", b"").write_body_to(body)
            return Opaque(header, io.BytesIO(body.getvalue()), encoded=True)
        raise ModeUnsetError("no message has been built")

    def multipart(self) -> Multipart:
        """
        Return the message as a Multipart.

        In opaque mode the written bytes are parsed one level deep.

        Raises:
            ModeUnsetError: If nothing was written or added
            ParsesAsNotMultipartError: If the written bytes are not multipart
            NoBoundaryError: If the Content-Type names no boundary
            ParseError: If the written bytes do not parse cleanly
        """
        if self._mode is BufferMode.MULTIPART:
            self._prepare_for_multipart_output()
        header = self.header.clone()
        if self._mode is BufferMode.MULTIPART:
            return Multipart(header, list(self._parts), b"", b"", header.get_boundary())
        if self._mode is BufferMode.OPAQUE:
            config = default_parser_config().without_recursion()
            msg = Opaque(header, io.BytesIO(self._buf.getvalue()), encoded=True)
            result = parse_multipart(msg, config)
            if not isinstance(result, Multipart):
                raise ParsesAsNotMultipartError("buffer content is not multipart")
            return result
        raise ModeUnsetError("no message has been built")

    def _materialize(self) -> Part:
        if self._mode is BufferMode.MULTIPART:
            return self.multipart()
        return self.opaque()

    def is_multipart(self) -> bool:
        return self._mode is BufferMode.MULTIPART

    def get_header(self) -> Header:
        return self.header

    def get_reader(self) -> BinaryIO:
        if self._mode is BufferMode.MULTIPART:
            raise MultipartError("buffer holds parts, not a body")
        return io.BytesIO(self._buf.getvalue())

    def get_parts(self) -> List[Part]:
        if self._mode is BufferMode.OPAQUE:
            raise OpaqueBufferError("buffer holds bytes, not parts")
        return self._parts

    def is_encoded(self) -> bool:
        return self._encoded

    def write_to(self, sink: BinaryIO) -> int:
        """
        Write the finished message.

        Raises:
            ModeUnsetError: If nothing was written or added
        """
        return self._materialize().write_to(sink)

    def clone(self) -> "Buffer":
        """
        Deep copy of the builder.

        A multipart buffer gets its boundary first, so the copy writes the
        same bytes as the original.
        """
        if self._mode is BufferMode.MULTIPART:
            self._prepare_for_multipart_output()
        other = Buffer(self.header.clone())
        other._mode = self._mode
        other._buf = io.BytesIO(self._buf.getvalue())
        other._buf.seek(0, io.SEEK_END)
        other._parts = [part.clone() for part in self._parts]
        other._encoded = self._encoded
        return other


def new_buffer(part: Part) -> Buffer:
    """
    Copy a part, and all of its sub-parts, into buffers.

    Opaque bodies are read in full. The encoded flag is carried over.
    """
    buf = Buffer(part.get_header().clone())
    if part.is_multipart():
        buf.set_mode(BufferMode.MULTIPART)
        for sub_part in part.get_parts():
            buf.add(new_buffer(sub_part))
        return buf

    buf.set_encoded(part.is_encoded())
    buf.set_mode(BufferMode.OPAQUE)
    if isinstance(part, Opaque):
        data = part.read_body() or b""
    else:
        data = part.get_reader().read()
    buf.write(data)
    return buf


def new_blank_buffer(part: Part) -> Buffer:
    """Buffer holding a copy of the part's header and nothing else."""
    return Buffer(part.get_header().clone())
