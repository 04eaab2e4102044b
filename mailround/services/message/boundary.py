"""Multipart boundary generation and boundary-delimited body splitting."""

import logging
import secrets
import string
from typing import Iterable, List, NamedTuple, Optional

from ...models.line_break import Break

logger = logging.getLogger(__name__)

BOUNDARY_LENGTH = 30
_BOUNDARY_ALPHABET = string.ascii_letters + string.digits


def generate_boundary() -> str:
    """
    Random boundary of 30 letters and digits.

    Such a boundary never needs quoting in a Content-Type parameter and
    cannot occur in base64 or quoted-printable lines by accident in any
    realistic message.
    """
    return "".join(secrets.choice(_BOUNDARY_ALPHABET) for _ in range(BOUNDARY_LENGTH))


def generate_safe_boundary(contents: Iterable[bytes]) -> str:
    """
    Random boundary that does not occur in any of the given payloads.

    Args:
        contents: Serialized child parts the boundary will separate

    Returns:
        Boundary string
    """
    payloads = list(contents)
    while True:
        boundary = generate_boundary()
        marker = boundary.encode("ascii")
        if not any(marker in payload for payload in payloads):
            return boundary
        logger.debug("Generated boundary collides with content, retrying")


class Delimiters(NamedTuple):
    """
    Delimiter lines for one boundary and line break.

    Attributes:
        start: "--B" + L, only at the very start of a body
        middle: L + "--B" + L
        end: L + "--B--" + L
        final: L + "--B--", closing a body with no break after it
    """

    start: bytes
    middle: bytes
    end: bytes
    final: bytes

    @classmethod
    def build(cls, boundary: str, lb: Break) -> "Delimiters":
        b = boundary.encode("utf-8")
        brk = lb.terminator
        return cls(
            start=b"--" + b + brk,
            middle=brk + b"--" + b + brk,
            end=brk + b"--" + b + b"--" + brk,
            final=brk + b"--" + b + b"--",
        )


class MultipartSplit(NamedTuple):
    """
    A multipart body cut at its boundaries.

    Attributes:
        prefix: Bytes before the first delimiter (including the break that
            starts an interior delimiter), b"" when the body opens with the
            start delimiter, None when there was no delimiter before the parts
        parts: Raw bytes of each child part, in order
        suffix: Bytes after the closing "--B--" (starting with its line
            break, if any), None when the closing delimiter was missing
    """

    prefix: Optional[bytes]
    parts: List[bytes]
    suffix: Optional[bytes]


def split_multipart(data: bytes, boundary: str, lb: Break) -> MultipartSplit:
    """
    Cut a multipart body into prefix, parts and suffix.

    Delimiter line breaks belong to the delimiters, so writing
    prefix + start + parts joined by middle + final + suffix reproduces the
    input exactly. A body containing no delimiter at all yields no parts.

    Args:
        data: Body bytes of the multipart part
        boundary: Boundary parameter of its Content-Type
        lb: Line break of its header

    Returns:
        MultipartSplit
    """
    delim = Delimiters.build(boundary, lb)
    prefix: Optional[bytes] = None
    parts: List[bytes] = []

    pos = 0
    if data.startswith(delim.start):
        prefix = b""
        pos = len(delim.start)

    while True:
        ix = data.find(delim.middle, pos)
        if ix < 0:
            break
        if prefix is None:
            prefix = data[: ix + len(lb.terminator)]
        else:
            parts.append(data[pos:ix])
        pos = ix + len(delim.middle)

    rest = data[pos:]
    suffix: Optional[bytes] = None
    ix = rest.find(delim.end)
    if ix >= 0:
        parts.append(rest[:ix])
        suffix = rest[ix + len(delim.final) :]
    elif rest.endswith(delim.final):
        parts.append(rest[: -len(delim.final)])
        suffix = b""
    elif rest or prefix is not None:
        parts.append(rest)

    if prefix is None:
        logger.debug("Multipart body has no opening boundary %r", boundary)
    if suffix is None:
        logger.debug("Multipart body has no closing boundary %r", boundary)
    return MultipartSplit(prefix, parts, suffix)
