"""Header field model keeping both the decoded form and the original bytes."""

import logging
from typing import NamedTuple, Optional

from ...config.parser_config import FoldEncoding
from ...models.line_break import Break
from .base import CharsetUnsupportedError
from .charset import CharsetRegistry
from .fold import fold, unfold
from .transcode import decode_words, encode_words

logger = logging.getLogger(__name__)


class Raw(NamedTuple):
    """
    Original bytes of a field as read, line break included.

    Attributes:
        data: The bytes of the field
        colon: Index of the colon separating name and body, -1 if none
    """

    data: bytes
    colon: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "Raw":
        return cls(data, data.find(b":"))

    @property
    def name(self) -> bytes:
        if self.colon < 0:
            return self.data.rstrip(b"\r\n")
        return self.data[: self.colon]

    @property
    def body(self) -> bytes:
        if self.colon < 0:
            return b""
        return self.data[self.colon + 1 :].rstrip(b"\r\n")


def _decode_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class Field:
    """
    One header field: a name, a decoded body and optional raw bytes.

    While raw bytes are attached they are what gets written, which is how
    unmodified input round-trips exactly. Changing the name or the body
    drops them, so the field is re-encoded and folded on output.
    """

    __slots__ = ("_name", "_body", "_raw")

    def __init__(self, name: str, body: str, raw: Optional[Raw] = None):
        if any(c in name for c in ":\r\n"):
            raise ValueError(f"Invalid field name: {name!r}")
        self._name = name
        self._body = body
        self._raw = raw

    @classmethod
    def parse(cls, data: bytes, charsets: Optional[CharsetRegistry] = None) -> "Field":
        """
        Parse one logical field line (with any continuation lines).

        A line without a colon is taken whole as the name with an empty body.
        Encoded words in the body are decoded; if the charset is not
        supported the body is kept as written.

        Args:
            data: Field bytes as read, including the trailing line break
            charsets: Registry for encoded words (process default if None)

        Returns:
            Field with raw bytes attached
        """
        raw = Raw.from_bytes(data)
        name = _decode_text(unfold(raw.name).strip())
        body = _decode_text(unfold(raw.body).strip())
        try:
            body = decode_words(body, charsets)
        except CharsetUnsupportedError as e:
            logger.warning("Keeping %s field undecoded: %s", name, e)

        return cls(name, body, raw)

    @property
    def name(self) -> str:
        return self._name

    @property
    def body(self) -> str:
        return self._body

    @property
    def raw(self) -> Optional[Raw]:
        return self._raw

    def set_name(self, name: str) -> None:
        """Rename the field, discarding the raw bytes."""
        if any(c in name for c in ":\r\n"):
            raise ValueError(f"Invalid field name: {name!r}")
        self._name = name
        self._raw = None

    def set_body(self, body: str) -> None:
        """Replace the decoded body, discarding the raw bytes."""
        self._body = body
        self._raw = None

    def set_raw(self, data: Optional[bytes]) -> None:
        """Attach new raw bytes (or drop them with None) leaving name and body alone."""
        self._raw = Raw.from_bytes(data) if data is not None else None

    def clone(self) -> "Field":
        return Field(self._name, self._body, self._raw)

    def string(self) -> str:
        """
        Render "Name: body" with the body RFC 2047 encoded as needed.

        Examples:
            >>> Field("Subject", "Hello").string()
            'Subject: Hello'
        """
        return f"{self._name}: {encode_words(self._body)}"

    def __str__(self) -> str:
        return self.string()

    def __bytes__(self) -> bytes:
        if self._raw is not None:
            return self._raw.data
        return self.string().encode("utf-8")

    def __repr__(self) -> str:
        return f"Field({self._name!r}, {self._body!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return NotImplemented
        return (self._name, self._body, self._raw) == (other._name, other._body, other._raw)

    def render(self, encoding: FoldEncoding, lb: Break, terminate: bool = True) -> bytes:
        """
        Bytes to write for this field.

        Raw bytes are written verbatim, adding the line break only when they
        lack one and terminate is set. Otherwise the field is encoded and
        folded.
        """
        if self._raw is not None:
            data = self._raw.data
            if terminate and not data.endswith((b"\n", b"\r")):
                data += lb.terminator
            return data
        return fold(encoding, self.string().encode("utf-8"), lb)
