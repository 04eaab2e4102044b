"""Line break conventions for headers and message parts."""

from enum import Enum


class Break(Enum):
    """
    Line break used when serializing a header or a message part.

    Each header carries its own break, so child parts of a multipart message
    may use a different convention than their parent.

    Attributes:
        CRLF: Carriage return followed by line feed (RFC 5322 wire format)
        LF: Line feed
        CR: Carriage return
        LFCR: Line feed followed by carriage return (seen from broken software)
        MEH: Unspecified; serialized as LF
    """

    CRLF = b"\r\n"
    LF = b"\n"
    CR = b"\r"
    LFCR = b"\n\r"
    MEH = b""

    @property
    def terminator(self) -> bytes:
        """Bytes written for this break."""
        if self is Break.MEH:
            return b"\n"
        return self.value

    @classmethod
    def from_bytes(cls, data: bytes) -> "Break":
        """
        Look up the break matching the given terminator bytes.

        Args:
            data: One of b"\\r\\n", b"\\n", b"\\r", b"\\n\\r"

        Returns:
            The matching Break, or Break.MEH for anything else
        """
        for lb in cls:
            if lb.value == data and lb is not Break.MEH:
                return lb
        return Break.MEH

    def __str__(self) -> str:
        return self.terminator.decode("ascii")
