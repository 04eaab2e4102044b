"""Header/body splitting, line break detection and header line framing."""

import logging
from typing import List, NamedTuple, Optional, Tuple

from ...models.line_break import Break

logger = logging.getLogger(__name__)

# Header/body terminators; the line break is the first half of each
TERMINATORS = (b"\r\n\r\n", b"\n\r\n\r", b"\n\n", b"\r\r")

# Line breaks tried, in order, when guessing the break of a header with no body
_GUESS_ORDER = (Break.CRLF, Break.LFCR, Break.LF, Break.CR)


class HeaderSplit(NamedTuple):
    """
    Result of locating the end of a header.

    Attributes:
        header: Header bytes, including the break ending the last field but
            not the blank line
        body: Bytes after the blank line, or None if no blank line was found
        lb: Line break detected for the header
    """

    header: bytes
    body: Optional[bytes]
    lb: Break


def detect_break(data: bytes) -> Break:
    """
    Guess the line break used by data.

    Examples:
        >>> detect_break(b"Subject: test\\r\\n")
        <Break.CRLF: b'\\r\\n'>
    """
    for lb in _GUESS_ORDER:
        if lb.value in data:
            return lb
    return Break.CR


def find_terminator(data: bytes) -> Optional[Tuple[int, Break]]:
    """
    Locate the earliest header/body terminator.

    Returns:
        (index of the terminator, line break) or None if there is none
    """
    best: Optional[Tuple[int, Break]] = None
    for terminator in TERMINATORS:
        ix = data.find(terminator)
        if ix >= 0 and (best is None or ix < best[0]):
            best = (ix, Break.from_bytes(terminator[: len(terminator) // 2]))
    return best


def leading_break(data: bytes) -> Optional[Break]:
    """The break data starts with, marking an empty header."""
    for lb in _GUESS_ORDER:
        if data.startswith(lb.value):
            return lb
    return None


def split_header(data: bytes) -> HeaderSplit:
    """
    Split message bytes into header and body.

    Data that starts with a line break has an empty header. Data with no
    blank line at all is treated as all header and no body.

    Examples:
        >>> split_header(b"Subject: test\\n\\nHello")
        HeaderSplit(header=b'Subject: test\\n', body=b'Hello', lb=<Break.LF: b'\\n'>)
    """
    lb = leading_break(data)
    if lb is not None:
        return HeaderSplit(b"", data[len(lb.value) :], lb)

    found = find_terminator(data)
    if found is None:
        return HeaderSplit(data, None, detect_break(data))

    ix, lb = found
    width = len(lb.value)
    return HeaderSplit(data[: ix + width], data[ix + 2 * width :], lb)


def _is_field_start(line: bytes) -> bool:
    return line[:1] not in (b" ", b"\t") and b":" in line


def split_lines(data: bytes, lb: Break) -> List[bytes]:
    """Split data after each line break, keeping the breaks."""
    brk = lb.terminator
    pieces = data.split(brk)
    lines = [piece + brk for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def parse_lines(data: bytes, lb: Break) -> Tuple[List[bytes], bytes]:
    """
    Frame header bytes into logical field lines.

    A field starts on a line that does not begin with whitespace and holds a
    colon. Every following line that starts with whitespace or has no colon
    continues it. Lines ahead of the first field are returned separately so
    the caller can report them.

    Args:
        data: Header bytes
        lb: Line break of the header

    Returns:
        Tuple of (field lines with their breaks, junk bytes before the first field)
    """
    fields: List[bytes] = []
    bad_start: List[bytes] = []
    for line in split_lines(data, lb):
        if _is_field_start(line):
            fields.append(line)
        elif fields:
            fields[-1] += line
        else:
            bad_start.append(line)

    junk = b"".join(bad_start)
    if junk:
        logger.warning("Header starts with %d bytes that are not a field", len(junk))
    return fields, junk
