"""Header parsing, field model and typed header access"""

from .addresses import parse_address_list, parse_address_list_heuristic, parse_address_list_strict
from .base import (
    AddressParseError,
    BadStartError,
    CharsetUnsupportedError,
    FieldIndexOutOfRangeError,
    FieldNotFoundError,
    HeaderError,
    TimeParseError,
    TooManyFieldsError,
    WrongAddressTypeError,
)
from .charset import (
    CharsetRegistry,
    default_charsets,
    new_default_registry,
    register_standard_charsets,
    set_default_charsets,
)
from .dates import format_time, parse_time
from .field import Field, Raw
from .fold import fold, unfold
from .header import Header, parse_header
from .header_base import HeaderBase
from .lines import HeaderSplit, detect_break, parse_lines, split_header
from .transcode import decode_words, encode_words

__all__ = [
    "parse_address_list",
    "parse_address_list_heuristic",
    "parse_address_list_strict",
    "AddressParseError",
    "BadStartError",
    "CharsetUnsupportedError",
    "FieldIndexOutOfRangeError",
    "FieldNotFoundError",
    "HeaderError",
    "TimeParseError",
    "TooManyFieldsError",
    "WrongAddressTypeError",
    "CharsetRegistry",
    "default_charsets",
    "new_default_registry",
    "register_standard_charsets",
    "set_default_charsets",
    "format_time",
    "parse_time",
    "Field",
    "Raw",
    "fold",
    "unfold",
    "Header",
    "parse_header",
    "HeaderBase",
    "HeaderSplit",
    "detect_break",
    "parse_lines",
    "split_header",
    "decode_words",
    "encode_words",
]
