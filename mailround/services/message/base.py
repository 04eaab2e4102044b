"""Abstract interface for message parts and message-level exceptions."""

import io
from abc import ABC, abstractmethod
from typing import BinaryIO, List, Optional, Sequence

from ..header.header import Header


class MessageError(Exception):
    """Base exception for message parsing and building errors."""

    pass


class MultipartError(MessageError):
    """Raised when a single body reader is requested from a multipart part."""

    pass


class NotMultipartError(MessageError):
    """Raised when sub-parts are requested from an opaque part."""

    pass


class NoBoundaryError(MessageError):
    """
    Raised when a multipart Content-Type has no boundary parameter.

    Attributes:
        message: The part, left opaque, so the caller may use it anyway
    """

    def __init__(self, message: Optional["Part"] = None):
        super().__init__("multipart content type has no boundary")
        self.message = message


class HeaderTooLargeError(MessageError):
    """Raised when no end of header was found within the configured limit."""

    pass


class PartTooLargeError(MessageError):
    """Raised when a multipart child exceeds the configured limit."""

    pass


class EmptyPartError(MessageError):
    """Reported when two boundaries have nothing between them."""

    pass


class ParseError(MessageError):
    """
    Aggregates the recoverable errors found while parsing.

    Attributes:
        errors: The individual errors, in the order found
        message: Best-effort parse result
    """

    def __init__(self, errors: Sequence[Exception], message: Optional["Part"] = None):
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"{len(errors)} error(s) while parsing message: {details}")
        self.errors = list(errors)
        self.message = message


class BufferModeError(MessageError):
    """Base exception for using a Buffer in the wrong mode."""

    pass


class ModeUnsetError(BufferModeError):
    """Raised when a Buffer is materialized before any content was added."""

    pass


class PartsBufferError(BufferModeError):
    """Raised when bytes are written to a Buffer that holds parts."""

    pass


class OpaqueBufferError(BufferModeError):
    """Raised when parts are added to a Buffer that holds bytes."""

    pass


class ParsesAsNotMultipartError(BufferModeError):
    """Raised when an opaque Buffer's bytes cannot be read back as multipart."""

    pass


class Part(ABC):
    """
    A message or one part of a multipart message.

    Either opaque (a header and a body stream) or multipart (a header and
    a list of sub-parts). Both kinds serialize themselves with write_to().
    """

    @abstractmethod
    def is_multipart(self) -> bool:
        pass

    @abstractmethod
    def get_header(self) -> Header:
        pass

    @abstractmethod
    def get_reader(self) -> BinaryIO:
        """
        Body stream of an opaque part.

        Raises:
            MultipartError: If this part is multipart
        """
        pass

    @abstractmethod
    def get_parts(self) -> List["Part"]:
        """
        Sub-parts of a multipart part.

        Raises:
            NotMultipartError: If this part is opaque
        """
        pass

    @abstractmethod
    def is_encoded(self) -> bool:
        """True when the body bytes are already transfer encoded."""
        pass

    @abstractmethod
    def write_to(self, sink: BinaryIO) -> int:
        """
        Serialize the part.

        Returns:
            Number of bytes written
        """
        pass

    @abstractmethod
    def clone(self) -> "Part":
        pass

    def __bytes__(self) -> bytes:
        buf = io.BytesIO()
        self.write_to(buf)
        return buf.getvalue()
