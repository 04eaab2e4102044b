"""Charset registry used to translate encoded header text to and from Unicode."""

import codecs
import logging
from dataclasses import dataclass
from encodings.aliases import aliases
from typing import Callable, Dict, List, Optional

from .base import CharsetUnsupportedError

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes], str]
Encoder = Callable[[str], bytes]

# bytes-to-bytes transforms that share the codec namespace but are not charsets
_NOT_CHARSETS = {
    "base64_codec",
    "bz2_codec",
    "hex_codec",
    "quopri_codec",
    "rot_13",
    "uu_codec",
    "zlib_codec",
}


@dataclass(frozen=True)
class Charset:
    """A named charset with its decoder and encoder."""

    name: str
    decoder: Decoder
    encoder: Encoder


def _ascii_decode(data: bytes) -> str:
    return data.decode("ascii", errors="replace")


def _ascii_encode(text: str) -> bytes:
    # non-ASCII characters become the SUB control character
    return bytes(ord(c) if ord(c) < 0x80 else 0x1A for c in text)


def _utf8_decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _utf8_encode(text: str) -> bytes:
    return text.encode("utf-8", errors="replace")


def _normalize(name: str) -> str:
    return name.strip().lower()


class CharsetRegistry:
    """
    Maps charset names to decoder/encoder pairs.

    Lookups are case-insensitive and treat "-" and "_" alike. An empty
    charset name means US-ASCII.
    """

    def __init__(self):
        self._charsets: Dict[str, Charset] = {}

    def register(self, name: str, decoder: Decoder, encoder: Encoder) -> None:
        """
        Register (or replace) a charset.

        Args:
            name: Charset name as it appears in messages
            decoder: Function turning bytes in that charset into text
            encoder: Function turning text into bytes in that charset
        """
        key = _normalize(name)
        self._charsets[key] = Charset(key, decoder, encoder)

    def unregister(self, name: str) -> None:
        self._charsets.pop(_normalize(name), None)

    def lookup(self, name: str) -> Charset:
        """
        Find the charset registered under name.

        Raises:
            CharsetUnsupportedError: If nothing is registered for name
        """
        key = _normalize(name) or "us-ascii"
        found = self._charsets.get(key) or self._charsets.get(key.replace("_", "-"))
        if found is None:
            found = self._charsets.get(key.replace("-", "_"))
        if found is None:
            raise CharsetUnsupportedError(name)
        return found

    def supports(self, name: str) -> bool:
        try:
            self.lookup(name)
        except CharsetUnsupportedError:
            return False
        return True

    def decode(self, name: str, data: bytes) -> str:
        return self.lookup(name).decoder(data)

    def encode(self, name: str, text: str) -> bytes:
        return self.lookup(name).encoder(text)

    def names(self) -> List[str]:
        return sorted(self._charsets)

    def copy(self) -> "CharsetRegistry":
        registry = CharsetRegistry()
        registry._charsets = dict(self._charsets)
        return registry


def new_default_registry() -> CharsetRegistry:
    """Registry with only UTF-8 and US-ASCII."""
    registry = CharsetRegistry()
    for name in ("utf-8", "utf8"):
        registry.register(name, _utf8_decode, _utf8_encode)
    for name in ("us-ascii", "ascii"):
        registry.register(name, _ascii_decode, _ascii_encode)
    return registry


def _codec_pair(codec: str):
    def decode(data: bytes) -> str:
        return data.decode(codec, errors="replace")

    def encode(text: str) -> bytes:
        return text.encode(codec, errors="replace")

    return decode, encode


def register_standard_charsets(registry: CharsetRegistry) -> CharsetRegistry:
    """
    Add every text codec known to Python to the registry.

    This covers the ISO-8859 family, the windows-125x code pages, KOI8,
    the CJK encodings and their common aliases (e.g. "greek"). Names
    already registered are left alone.

    Returns:
        The same registry, for chaining
    """
    added = 0
    for alias, codec in aliases.items():
        if codec in _NOT_CHARSETS:
            continue
        try:
            codecs.lookup(codec)
        except LookupError:
            continue
        decode, encode = _codec_pair(codec)
        for name in (alias, codec):
            if not registry.supports(name):
                registry.register(name, decode, encode)
                added += 1
    logger.debug("Registered %d standard charset names", added)
    return registry


_default_registry: Optional[CharsetRegistry] = None


def default_charsets() -> CharsetRegistry:
    """Process-wide registry used when no registry is passed explicitly."""
    global _default_registry
    if _default_registry is None:
        _default_registry = new_default_registry()
    return _default_registry


def set_default_charsets(registry: CharsetRegistry) -> None:
    """Replace the process-wide registry."""
    global _default_registry
    _default_registry = registry
