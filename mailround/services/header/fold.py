"""Folding and unfolding of header field lines."""

import re
from typing import List, Optional

from ...config.parser_config import FoldEncoding
from ...models.line_break import Break

_WHITESPACE = b" \t"
_BREAK_THEN_SPACE = re.compile(rb"(?:\r\n|\n\r|\r|\n)([ \t])[ \t]*")
_BARE_BREAK = re.compile(rb"[\r\n]")


def _first_content(line: bytes, first: bool) -> int:
    """Index of the first byte a fold may follow."""
    start = 0
    if first:
        colon = line.find(b":")
        if colon >= 0:
            start = colon + 1
    while start < len(line) and line[start] in _WHITESPACE:
        start += 1
    return start


def _is_fold_point(line: bytes, i: int) -> bool:
    # the last whitespace byte of a run, so continuation lines open with
    # exactly one whitespace byte
    return line[i] in _WHITESPACE and line[i + 1] not in _WHITESPACE


def _find_fold_point(line: bytes, low: int, high: int, last: bool) -> Optional[int]:
    indexes = range(high, low - 1, -1) if last else range(low, high + 1)
    for i in indexes:
        if _is_fold_point(line, i):
            return i
    return None


def fold(encoding: FoldEncoding, line: bytes, lb: Break) -> bytes:
    """
    Fold a single "Name: body" line and terminate it with the line break.

    Lines are broken before whitespace so that no physical line is longer
    than the preferred length when possible. If there is no whitespace in
    reach, the line may run up to the forced length before breaking at the
    next whitespace. A run of text with no whitespace at all is split at
    exactly the forced length and the remainder is indented.

    Args:
        encoding: Fold rules
        line: Unterminated field line
        lb: Line break to use

    Returns:
        The folded bytes including the final line break
    """
    brk = lb.terminator
    preferred = encoding.preferred_fold_length
    forced = encoding.forced_fold_length
    if not encoding.folds or len(line) <= preferred:
        return line + brk

    indent = encoding.indent.encode("ascii")
    out: List[bytes] = []
    rest = line
    first = True
    while len(rest) > preferred:
        start = _first_content(rest, first)
        # never fold inside trailing whitespace
        end = len(rest.rstrip(_WHITESPACE))
        first = False

        fold_at = None
        if start < end - 1:
            fold_at = _find_fold_point(rest, start + 1, min(preferred, end - 2), last=True)
            if fold_at is None:
                fold_at = _find_fold_point(rest, preferred + 1, min(forced, end - 2), last=False)

        if fold_at is not None:
            out.append(rest[:fold_at] + brk)
            rest = rest[fold_at:]
        elif len(rest) <= forced:
            break
        else:
            out.append(rest[:forced] + brk)
            rest = rest[forced:]
            if rest[:1] not in (b" ", b"\t"):
                rest = indent + rest

    out.append(rest + brk)
    return b"".join(out)


def unfold(data: bytes) -> bytes:
    """
    Join folded lines back into one.

    Each line break followed by whitespace collapses to the first whitespace
    byte after it (a space or a tab). Any remaining bare line breaks are
    removed.

    Examples:
        >>> unfold(b"a\\n b\\n\\tc\\n d\\n")
        b'a b\\tc d'
    """
    return _BARE_BREAK.sub(b"", _BREAK_THEN_SPACE.sub(rb"\1", data))
