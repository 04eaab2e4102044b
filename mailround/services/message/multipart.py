"""Multipart message parts: a header plus boundary-delimited sub-parts."""

from typing import BinaryIO, List, Optional

from ...models.param_value import ParameterNotFoundError
from ..header.base import FieldNotFoundError, TooManyFieldsError
from ..header.header import Header
from .base import MultipartError, Part
from .boundary import Delimiters


class Multipart(Part):
    """
    A part whose body is a list of sub-parts separated by a boundary.

    The prefix (preamble) and suffix (epilogue) are kept byte for byte. A
    prefix of None records that the body had no opening delimiter and a
    suffix of None that it had no closing delimiter; both are reproduced as
    missing on output unless strict output is requested.

    The boundary written is the one on the current Content-Type, so
    changing the header changes the output. The boundary seen while parsing
    is only used when the header no longer names one.
    """

    def __init__(
        self,
        header: Header,
        parts: Optional[List[Part]] = None,
        prefix: Optional[bytes] = None,
        suffix: Optional[bytes] = None,
        boundary: str = "",
    ):
        self.header = header
        self.parts: List[Part] = list(parts or [])
        self.prefix = prefix
        self.suffix = suffix
        self._boundary = boundary

    def is_multipart(self) -> bool:
        return True

    def get_header(self) -> Header:
        return self.header

    def get_reader(self) -> BinaryIO:
        raise MultipartError("multipart part has no single body reader")

    def get_parts(self) -> List[Part]:
        return self.parts

    def is_encoded(self) -> bool:
        return all(part.is_encoded() for part in self.parts)

    @property
    def boundary(self) -> str:
        """Boundary used on output."""
        try:
            return self.header.get_boundary() or self._boundary
        except (FieldNotFoundError, ParameterNotFoundError, ValueError):
            return self._boundary
        except TooManyFieldsError as e:
            boundary = e.value.boundary if e.value is not None else ""
            return boundary or self._boundary

    def write_body_to(self, sink: BinaryIO, strict: bool = False) -> int:
        """
        Write the prefix, delimited parts and suffix.

        Args:
            sink: Destination
            strict: Always write the opening and closing delimiters, even
                when the parsed body lacked them

        Returns:
            Number of bytes written

        Raises:
            MultipartError: If no boundary is known
        """
        boundary = self.boundary
        if not boundary:
            raise MultipartError("cannot write multipart body without a boundary")

        delim = Delimiters.build(boundary, self.header.break_)

        total = 0

        def emit(data: bytes) -> None:
            nonlocal total
            sink.write(data)
            total += len(data)

        if self.prefix is not None:
            emit(self.prefix)
            emit(delim.start)
        elif strict:
            emit(delim.start)

        for i, part in enumerate(self.parts):
            if i > 0:
                emit(delim.middle)
            total += part.write_to(sink)

        if self.suffix is not None:
            emit(delim.final)
            emit(self.suffix)
        elif strict:
            emit(delim.end)
        return total

    def write_to(self, sink: BinaryIO, strict: bool = False) -> int:
        total = self.header.write_to(sink)
        return total + self.write_body_to(sink, strict)

    def clone(self) -> "Multipart":
        return Multipart(
            self.header.clone(),
            [part.clone() for part in self.parts],
            self.prefix,
            self.suffix,
            self._boundary,
        )
