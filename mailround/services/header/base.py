"""Exceptions raised by header parsing and header field access."""

from typing import Any, Optional


class HeaderError(Exception):
    """Base exception for header errors."""

    pass


class BadStartError(HeaderError):
    """
    Raised when a header begins with lines that are not header fields.

    This is recoverable: the fields after the junk were parsed and the
    resulting header is attached.

    Attributes:
        bad_start: The skipped bytes
        header: The header parsed from the remaining lines (may be None)
    """

    def __init__(self, bad_start: bytes, header: Optional[Any] = None):
        super().__init__(f"header starts with {len(bad_start)} bytes that are not a field")
        self.bad_start = bad_start
        self.header = header


class FieldIndexOutOfRangeError(HeaderError, IndexError):
    """Raised when a positional field operation is outside the header."""

    pass


class FieldNotFoundError(HeaderError):
    """Raised when the named field is not present in the header."""

    def __init__(self, name: str):
        super().__init__(f"no such header field: {name}")
        self.name = name


class TooManyFieldsError(HeaderError):
    """
    Raised when a single value was requested but the field occurs more than once.

    Attributes:
        name: Field name requested
        value: Best-effort value taken from the first occurrence
    """

    def __init__(self, name: str, value: Any = None):
        super().__init__(f"many header fields found: {name}")
        self.name = name
        self.value = value


class WrongAddressTypeError(HeaderError, TypeError):
    """Raised when an address setter receives something other than a string or an address."""

    pass


class AddressParseError(HeaderError, ValueError):
    """Raised when a string given to an address setter does not parse."""

    pass


class TimeParseError(HeaderError, ValueError):
    """Raised when no supported date format matches a field body."""

    pass


class CharsetUnsupportedError(HeaderError, LookupError):
    """Raised when an encoded word or body declares a charset with no registered codec."""

    def __init__(self, charset: str):
        super().__init__(f"unsupported byte encoding: {charset}")
        self.charset = charset
