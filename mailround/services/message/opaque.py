"""Opaque message parts: a header plus an undivided body."""

import io
from typing import BinaryIO, List, Optional

from ...utils.io_utils import CountingWriter, copy_stream, read_all
from ..header.header import Header
from ..transfer.registry import apply_transfer_encoding
from .base import NotMultipartError, Part


class Opaque(Part):
    """
    A part whose body is not broken down any further.

    When the body is not yet transfer encoded (is_encoded() is False) the
    encoding named by the header is applied on output. A seekable body is
    rewound after writing so the part can be serialized more than once.
    """

    def __init__(self, header: Header, reader: Optional[BinaryIO] = None, encoded: bool = False):
        self.header = header
        self._reader = reader
        self._encoded = encoded

    def is_multipart(self) -> bool:
        return False

    def get_header(self) -> Header:
        return self.header

    def get_reader(self) -> BinaryIO:
        if self._reader is None:
            return io.BytesIO()
        return self._reader

    def has_body(self) -> bool:
        """False for a part that was all header."""
        return self._reader is not None

    def get_parts(self) -> List[Part]:
        raise NotMultipartError("opaque part has no sub-parts")

    def is_encoded(self) -> bool:
        return self._encoded

    def set_encoded(self, encoded: bool) -> None:
        self._encoded = encoded

    def read_body(self) -> Optional[bytes]:
        """
        Return the whole body without consuming it.

        The body is buffered in memory so later reads see it again.
        """
        if self._reader is None:
            return None
        data = read_all(self._reader)
        self._reader = io.BytesIO(data)
        return data

    def write_to(self, sink: BinaryIO) -> int:
        total = self.header.write_to(sink)
        if self._reader is None:
            return total

        start = self._reader.tell() if self._reader.seekable() else None
        if self._encoded:
            total += copy_stream(self._reader, sink)
        else:
            counter = CountingWriter(sink)
            with apply_transfer_encoding(self.header, counter) as encoder:
                copy_stream(self._reader, encoder)
            total += counter.count

        if start is not None:
            self._reader.seek(start)
        return total

    def clone(self) -> "Opaque":
        data = self.read_body()
        reader = io.BytesIO(data) if data is not None else None
        return Opaque(self.header.clone(), reader, self._encoded)


def attachment_file(
    data: bytes, media_type: str, filename: str, transfer_encoding: str = "base64"
) -> Opaque:
    """
    Build an attachment part.

    Args:
        data: Attachment content (not yet encoded)
        media_type: Content type such as "application/pdf"
        filename: Name given in Content-Disposition
        transfer_encoding: Encoding applied when the part is written

    Returns:
        Opaque part ready to add to a multipart Buffer
    """
    header = Header()
    header.set_media_type(media_type)
    header.set_presentation("attachment")
    header.set_filename(filename)
    header.set_transfer_encoding(transfer_encoding)
    return Opaque(header, io.BytesIO(data), encoded=False)
