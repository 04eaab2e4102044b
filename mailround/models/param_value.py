"""Parameterized header values such as Content-Type and Content-Disposition."""

import urllib.parse
from email.utils import decode_rfc2231, encode_rfc2231, quote
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple

# Well-known parameter names
BOUNDARY = "boundary"
CHARSET = "charset"
FILENAME = "filename"

# RFC 2045 tspecials
_TSPECIALS = set('()<>@,;:\\"/[]?=')

Modifier = Callable[[str, Dict[str, str]], str]


class ParamValueParseError(ValueError):
    """Raised when a parameterized field body cannot be parsed."""

    pass


class ParameterNotFoundError(KeyError):
    """Raised when a named parameter is absent from a ParamValue."""

    pass


def _is_token(s: str) -> bool:
    return bool(s) and all(32 < ord(c) < 127 and c not in _TSPECIALS for c in s)


def _check_value(value: str) -> None:
    major, sep, minor = value.partition("/")
    if not _is_token(major) or (sep and not _is_token(minor)):
        raise ParamValueParseError(f"invalid parameterized value: {value!r}")


def _scan_params(text: str) -> Iterator[Tuple[str, str, bool]]:
    """Yield (name, value, was_quoted) for each "; name=value" pair."""
    i, n = 0, len(text)
    while i < n:
        while i < n and text[i] in " \t\r\n;":
            i += 1
        if i >= n:
            return

        eq = text.find("=", i)
        if eq < 0:
            raise ParamValueParseError(f"parameter without value: {text[i:]!r}")
        name = text[i:eq].strip().lower()
        if not _is_token(name):
            raise ParamValueParseError(f"invalid parameter name: {name!r}")

        i = eq + 1
        while i < n and text[i] in " \t":
            i += 1

        if i < n and text[i] == '"':
            i += 1
            chars: List[str] = []
            while i < n and text[i] != '"':
                if text[i] == "\\" and i + 1 < n:
                    i += 1
                chars.append(text[i])
                i += 1
            if i >= n:
                raise ParamValueParseError(f"unterminated quoted parameter: {name!r}")
            i += 1
            yield name, "".join(chars), True
        else:
            end = text.find(";", i)
            if end < 0:
                end = n
            value = text[i:end].strip()
            if not value:
                raise ParamValueParseError(f"empty parameter value: {name!r}")
            i = end
            yield name, value, False


def _unquote_extended(value: str, charset: Optional[str]) -> str:
    try:
        return urllib.parse.unquote(value, encoding=charset or "us-ascii", errors="replace")
    except LookupError:
        return urllib.parse.unquote(value, encoding="us-ascii", errors="replace")


def _parse_params(text: str) -> Dict[str, str]:
    params: Dict[str, str] = {}
    continuations: Dict[str, List[Tuple[int, str, bool]]] = {}

    for name, value, quoted in _scan_params(text):
        if "*" not in name:
            params.setdefault(name, value)
            continue

        base, _, section = name.partition("*")
        if section == "":
            # name*=charset'lang'value
            charset, _, encoded = decode_rfc2231(value)
            params[base] = _unquote_extended(encoded, charset)
            continue

        extended = section.endswith("*") and not quoted
        index = section.rstrip("*")
        if not index.isdigit():
            raise ParamValueParseError(f"invalid parameter section: {name!r}")
        continuations.setdefault(base, []).append((int(index), value, extended))

    for base, pieces in continuations.items():
        pieces.sort()
        charset = None
        decoded = []
        for position, value, extended in pieces:
            if extended:
                if position == 0:
                    charset, _, value = decode_rfc2231(value)
                decoded.append(_unquote_extended(value, charset))
            else:
                decoded.append(value)
        params[base] = "".join(decoded)

    return params


def _format_param(name: str, value: str) -> str:
    if not value.isascii():
        return f"{name}*={encode_rfc2231(value, 'utf-8')}"
    if _is_token(value):
        return f"{name}={value}"
    return f'{name}="{quote(value)}"'


class ParamValue:
    """
    Immutable parameterized value, e.g. ``text/plain; charset=UTF-8``.

    The primary value is kept as given; parameter names are lowercased and
    kept in insertion order. Use :func:`modify` to derive a changed copy.

    Examples:
        >>> pv = ParamValue.parse("text/plain; charset=UTF-8")
        >>> pv.type, pv.subtype, pv.charset
        ('text', 'plain', 'UTF-8')
    """

    __slots__ = ("_value", "_params")

    def __init__(self, value: str, params: Optional[Mapping[str, str]] = None):
        self._value = value
        self._params: Dict[str, str] = {}
        for k, v in (params or {}).items():
            self._params[k.lower()] = v

    @classmethod
    def parse(cls, text: str) -> "ParamValue":
        """
        Parse a field body into a ParamValue.

        Args:
            text: Field body such as ``attachment; filename="a.pdf"``

        Returns:
            Parsed ParamValue

        Raises:
            ParamValueParseError: If the primary value or a parameter is malformed
        """
        value, _, rest = text.partition(";")
        value = value.strip().lower()
        _check_value(value)
        return cls(value, _parse_params(rest))

    @property
    def value(self) -> str:
        return self._value

    @property
    def media_type(self) -> str:
        return self._value

    @property
    def disposition(self) -> str:
        return self._value

    @property
    def presentation(self) -> str:
        return self._value

    @property
    def type(self) -> str:
        """Major type; empty when the value has no slash."""
        major, sep, _ = self._value.partition("/")
        return major if sep else ""

    @property
    def subtype(self) -> str:
        """Minor type; empty when the value has no slash."""
        _, sep, minor = self._value.partition("/")
        return minor if sep else ""

    @property
    def parameters(self) -> Dict[str, str]:
        return dict(self._params)

    def parameter(self, name: str) -> str:
        """
        Return the named parameter.

        Raises:
            ParameterNotFoundError: If the parameter is not set
        """
        try:
            return self._params[name.lower()]
        except KeyError:
            raise ParameterNotFoundError(name) from None

    def has_parameter(self, name: str) -> bool:
        return name.lower() in self._params

    @property
    def charset(self) -> str:
        return self._params.get(CHARSET, "")

    @property
    def boundary(self) -> str:
        return self._params.get(BOUNDARY, "")

    @property
    def filename(self) -> str:
        return self._params.get(FILENAME, "")

    def __str__(self) -> str:
        parts = [self._value]
        parts.extend(_format_param(k, v) for k, v in self._params.items())
        return "; ".join(parts)

    def __bytes__(self) -> bytes:
        return str(self).encode("utf-8")

    def __repr__(self) -> str:
        return f"ParamValue({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParamValue):
            return NotImplemented
        return self._value == other._value and self._params == other._params

    def __hash__(self) -> int:
        return hash((self._value, tuple(self._params.items())))


def change(value: str) -> Modifier:
    """Modifier replacing the primary value."""

    def apply(_old: str, params: Dict[str, str]) -> str:
        return value

    return apply


def set_param(name: str, value: str) -> Modifier:
    """Modifier setting (or replacing) one parameter."""

    def apply(old: str, params: Dict[str, str]) -> str:
        params[name.lower()] = value
        return old

    return apply


def delete_param(name: str) -> Modifier:
    """Modifier removing one parameter if present."""

    def apply(old: str, params: Dict[str, str]) -> str:
        params.pop(name.lower(), None)
        return old

    return apply


def modify(pv: ParamValue, *changes: Modifier) -> ParamValue:
    """
    Return a new ParamValue with the given changes applied in order.

    Examples:
        >>> str(modify(ParamValue("text/json"), set_param("boundary", "abc123"),
        ...            change("application/json")))
        'application/json; boundary=abc123'
    """
    value = pv.value
    params = pv.parameters
    for apply in changes:
        value = apply(value, params)
    return ParamValue(value, params)
