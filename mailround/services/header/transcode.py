"""RFC 2047 encoded-word encoding and decoding for header field bodies."""

import base64
import binascii
import logging
import quopri
import re
from typing import List, Optional

from .charset import CharsetRegistry, default_charsets

logger = logging.getLogger(__name__)

ENCODED_WORD = re.compile(r"=\?([^?\s]+)\?([bBqQ])\?([^?\s]*)\?=")

# Longest encoded word allowed by RFC 2047
MAX_WORD_LENGTH = 75

_WORD_PREFIX = "=?utf-8?b?"
_WORD_SUFFIX = "?="
# bytes of UTF-8 that fit in one word once base64 encoded
_WORD_PAYLOAD = (MAX_WORD_LENGTH - len(_WORD_PREFIX) - len(_WORD_SUFFIX)) // 4 * 3


def needs_encoding(text: str) -> bool:
    """
    True when text holds anything besides printable ASCII, space and tab.

    Examples:
        >>> needs_encoding("Hello world")
        False
        >>> needs_encoding("Caf\\u00e9")
        True
    """
    return any(c != "\t" and not " " <= c <= "~" for c in text)


def _chunks(text: str) -> List[bytes]:
    # never split a character across two words
    chunks: List[bytes] = []
    current = b""
    for c in text:
        encoded = c.encode("utf-8")
        if current and len(current) + len(encoded) > _WORD_PAYLOAD:
            chunks.append(current)
            current = b""
        current += encoded
    if current:
        chunks.append(current)
    return chunks


def encode_words(text: str) -> str:
    """
    Encode text as UTF-8 base64 encoded words if it needs encoding.

    Text that is already printable ASCII is returned unchanged. Otherwise the
    whole text becomes one or more encoded words, separated by spaces, each
    no longer than 75 characters.

    Examples:
        >>> encode_words("plain")
        'plain'
        >>> encode_words("\\u2680\\u2681")
        '=?utf-8?b?4pqA4pqB?='
    """
    if not needs_encoding(text):
        return text

    words = [
        _WORD_PREFIX + base64.b64encode(chunk).decode("ascii") + _WORD_SUFFIX
        for chunk in _chunks(text)
    ]
    return " ".join(words)


def _decode_word(match: "re.Match[str]", charsets: CharsetRegistry) -> str:
    charset, encoding, payload = match.groups()
    # RFC 2231 allows a language suffix: utf-8*en
    charset = charset.split("*", 1)[0]

    if encoding in "bB":
        padded = payload + "=" * (-len(payload) % 4)
        data = base64.b64decode(padded)
    else:
        data = quopri.decodestring(payload.encode("ascii"), header=True)

    return charsets.decode(charset, data)


def decode_words(text: str, charsets: Optional[CharsetRegistry] = None) -> str:
    """
    Replace every RFC 2047 encoded word in text with its decoded form.

    Whitespace between two adjacent encoded words is dropped. Malformed words
    are left exactly as they appear.

    Args:
        text: Unfolded field body
        charsets: Registry to decode with (process default if None)

    Returns:
        Decoded text

    Raises:
        CharsetUnsupportedError: If a word names a charset with no codec
    """
    registry = charsets or default_charsets()

    out: List[str] = []
    pos = 0
    previous_was_word = False
    for match in ENCODED_WORD.finditer(text):
        between = text[pos : match.start()]
        try:
            decoded: Optional[str] = _decode_word(match, registry)
        except (binascii.Error, UnicodeError):
            logger.debug("Leaving malformed encoded word as-is: %s", match.group(0))
            decoded = None

        if not (decoded is not None and previous_was_word and not between.strip()):
            out.append(between)

        if decoded is None:
            out.append(match.group(0))
            previous_was_word = False
        else:
            out.append(decoded)
            previous_was_word = True
        pos = match.end()

    out.append(text[pos:])
    return "".join(out)
