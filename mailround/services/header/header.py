"""Header with typed accessors for well-known fields and a parsed-value cache."""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from ...config.parser_config import DO_NOT_FOLD_ENCODING, FoldEncoding
from ...models.address import Address, Group, Mailbox, format_address_list
from ...models.line_break import Break
from ...models.param_value import (
    BOUNDARY,
    CHARSET,
    FILENAME,
    ParamValue,
    change,
    modify,
    set_param,
)
from .addresses import parse_address_list, parse_address_list_strict
from .base import (
    AddressParseError,
    BadStartError,
    FieldNotFoundError,
    TooManyFieldsError,
    WrongAddressTypeError,
)
from .charset import CharsetRegistry
from .dates import format_time, parse_time
from .field import Field
from .header_base import HeaderBase
from .lines import parse_lines

logger = logging.getLogger(__name__)

# Field names defined by RFC 5322 and RFC 2045
BCC = "Bcc"
CC = "Cc"
COMMENTS = "Comments"
CONTENT_DISPOSITION = "Content-disposition"
CONTENT_TRANSFER_ENCODING = "Content-transfer-encoding"
CONTENT_TYPE = "Content-type"
DATE = "Date"
FROM = "From"
IN_REPLY_TO = "In-reply-to"
KEYWORDS = "Keywords"
MESSAGE_ID = "Message-id"
REFERENCES = "References"
REPLY_TO = "Reply-to"
SENDER = "Sender"
SUBJECT = "Subject"
TO = "To"

AddressLike = Union[str, Mailbox, Group]


class _CacheEntry(NamedTuple):
    kind: str
    bodies: Tuple[str, ...]
    value: Any


class Header(HeaderBase):
    """
    Ordered header fields with typed getters and setters.

    Singular getters raise FieldNotFoundError when the field is missing and
    TooManyFieldsError (carrying the value of the first field) when it
    appears more than once. Parsed values are cached per lowercased field
    name; a cache entry is only used while the bodies it was built from are
    unchanged, so editing a Field directly never yields a stale value.
    """

    def __init__(
        self,
        fields: Optional[Iterable[Field]] = None,
        lb: Break = Break.LF,
        fold_encoding: Optional[FoldEncoding] = None,
    ):
        super().__init__(fields, lb, fold_encoding)
        self._value_cache: Dict[str, _CacheEntry] = {}

    @classmethod
    def parse(
        cls, data: bytes, lb: Break, charsets: Optional[CharsetRegistry] = None
    ) -> "Header":
        """
        Parse header bytes.

        The returned header never folds, so that unchanged input is written
        back untouched; call set_fold_encoding() to change that.

        Args:
            data: Header bytes (fields only, without the blank line)
            lb: Line break used by the header
            charsets: Registry for encoded words (process default if None)

        Returns:
            Parsed header

        Raises:
            BadStartError: If junk precedes the first field; the parsed
                header is attached to the error
        """
        lines, junk = parse_lines(data, lb)
        header = cls([Field.parse(line, charsets) for line in lines], lb, DO_NOT_FOLD_ENCODING)
        if junk:
            raise BadStartError(junk, header)
        return header

    def clone(self) -> "Header":
        """Deep copy; cached values are immutable and shared."""
        other = Header()
        self._copy_into(other)
        other._value_cache = dict(self._value_cache)
        return other

    # value cache

    def _invalidate(self, name: str) -> None:
        self._value_cache.pop(name.lower(), None)

    def _bodies(self, name: str) -> Tuple[str, ...]:
        return tuple(self.get_all_bodies(name))

    def _cached(self, name: str, kind: str) -> Tuple[bool, Any]:
        entry = self._value_cache.get(name.lower())
        if entry is None or entry.kind != kind or entry.bodies != self._bodies(name):
            return False, None
        return True, entry.value

    def _store(self, name: str, kind: str, value: Any) -> None:
        self._value_cache[name.lower()] = _CacheEntry(kind, self._bodies(name), value)

    def _get_single(self, name: str, kind: str, parse: Callable[[str], Any]) -> Any:
        found, value = self._cached(name, kind)
        if found:
            return value

        try:
            body = self.get(name)
        except TooManyFieldsError as e:
            raise TooManyFieldsError(name, parse(e.value)) from None

        value = parse(body)
        self._store(name, kind, value)
        return value

    # plain bodies

    def get(self, name: str) -> str:
        """
        Body of the only field with the given name.

        Raises:
            FieldNotFoundError: If the field is missing
            TooManyFieldsError: If the field occurs more than once; the first
                body is available as the error's value
        """
        fields = self.get_all_fields_named(name)
        if not fields:
            raise FieldNotFoundError(name)
        if len(fields) > 1:
            raise TooManyFieldsError(name, fields[0].body)
        return fields[0].body

    def get_all(self, name: str) -> List[str]:
        """
        Bodies of every field with the given name.

        Raises:
            FieldNotFoundError: If the field is missing
        """
        bodies = self.get_all_bodies(name)
        if not bodies:
            raise FieldNotFoundError(name)
        return bodies

    def set(self, name: str, body: str) -> None:
        """
        Replace the first field with the given name and delete the others.

        The field is appended when it is not present.
        """
        ixs = self.get_indexes_named(name)
        if not ixs:
            self.append_field(name, body)
            return

        self.get_field(ixs[0]).set_body(body)
        for ix in reversed(ixs[1:]):
            self.delete_field(ix)
        self._invalidate(name)

    def set_all(self, name: str, bodies: Sequence[str]) -> None:
        """
        Make the header hold exactly one field with the given name per body.

        Existing fields are reused in order, new ones are appended at the end
        and surplus ones are deleted.
        """
        ixs = self.get_indexes_named(name)
        for i, body in enumerate(bodies):
            if i < len(ixs):
                self.get_field(ixs[i]).set_body(body)
            else:
                self.append_field(name, body)

        for ix in reversed(ixs[len(bodies) :]):
            self.delete_field(ix)
        self._invalidate(name)

    # dates

    def get_time(self, name: str) -> datetime:
        """
        Parse the named field as a date.

        Raises:
            FieldNotFoundError: If the field is missing
            TooManyFieldsError: If the field occurs more than once
            TimeParseError: If the body is not a recognizable date
        """
        return self._get_single(name, "time", parse_time)

    def set_time(self, name: str, value: datetime) -> None:
        self.set(name, format_time(value))
        self._store(name, "time", value)

    def get_date(self) -> datetime:
        return self.get_time(DATE)

    def set_date(self, value: datetime) -> None:
        self.set_time(DATE, value)

    # address lists

    def get_address_list(self, name: str) -> List[Address]:
        """
        Parse the named field as an address list.

        Parsing never fails: a body that is not valid RFC 5322 is split up
        heuristically, so odd input gives odd addresses.

        Raises:
            FieldNotFoundError: If the field is missing
            TooManyFieldsError: If the field occurs more than once
        """
        return list(self._get_single(name, "addresses", lambda b: tuple(parse_address_list(b))))

    def get_all_address_lists(self, name: str) -> List[List[Address]]:
        """
        Parse every field with the given name as an address list.

        Raises:
            FieldNotFoundError: If the field is missing
        """
        found, value = self._cached(name, "address-lists")
        if not found:
            value = tuple(tuple(parse_address_list(b)) for b in self.get_all(name))
            self._store(name, "address-lists", value)
        return [list(al) for al in value]

    def set_address_list(self, name: str, addresses: Iterable[Address]) -> None:
        value = tuple(addresses)
        self.set(name, format_address_list(value))
        self._store(name, "addresses", value)

    def set_all_address_lists(self, name: str, lists: Iterable[Iterable[Address]]) -> None:
        value = tuple(tuple(al) for al in lists)
        self.set_all(name, [format_address_list(al) for al in value])
        self._store(name, "address-lists", value)

    def _set_addresses(self, name: str, addresses: Iterable[AddressLike]) -> None:
        values: List[Address] = []
        for a in addresses:
            if isinstance(a, str):
                parsed = parse_address_list_strict(a)
                if not parsed:
                    raise AddressParseError(f"no address in {a!r}")
                values.extend(parsed)
            elif isinstance(a, (Mailbox, Group)):
                values.append(a)
            else:
                raise WrongAddressTypeError(f"expected a string or an address, got {type(a).__name__}")
        self.set_address_list(name, values)

    def get_to(self) -> List[Address]:
        return self.get_address_list(TO)

    def set_to(self, *addresses: AddressLike) -> None:
        """
        Set the To field from address strings or address objects.

        Raises:
            AddressParseError: If a string does not strictly parse
            WrongAddressTypeError: If a value is neither a string nor an address
        """
        self._set_addresses(TO, addresses)

    def get_cc(self) -> List[Address]:
        return self.get_address_list(CC)

    def set_cc(self, *addresses: AddressLike) -> None:
        self._set_addresses(CC, addresses)

    def get_bcc(self) -> List[Address]:
        return self.get_address_list(BCC)

    def set_bcc(self, *addresses: AddressLike) -> None:
        self._set_addresses(BCC, addresses)

    def get_from(self) -> List[Address]:
        return self.get_address_list(FROM)

    def set_from(self, *addresses: AddressLike) -> None:
        self._set_addresses(FROM, addresses)

    def get_sender(self) -> List[Address]:
        return self.get_address_list(SENDER)

    def set_sender(self, *addresses: AddressLike) -> None:
        self._set_addresses(SENDER, addresses)

    def get_reply_to(self) -> List[Address]:
        return self.get_address_list(REPLY_TO)

    def set_reply_to(self, *addresses: AddressLike) -> None:
        self._set_addresses(REPLY_TO, addresses)

    # parameterized values

    def get_param_value(self, name: str) -> ParamValue:
        """
        Parse the named field as a parameterized value.

        Raises:
            FieldNotFoundError: If the field is missing
            TooManyFieldsError: If the field occurs more than once
            ParamValueParseError: If the body does not parse
        """
        return self._get_single(name, "param", ParamValue.parse)

    def set_param_value(self, name: str, value: ParamValue) -> None:
        self.set(name, str(value))
        self._store(name, "param", value)

    def _set_param_value_value(self, name: str, value: str) -> None:
        # make sure a duplicate field cannot get in the way
        for ix in reversed(self.get_indexes_named(name)[1:]):
            self.delete_field(ix)

        try:
            pv = modify(self.get_param_value(name), change(value))
        except (FieldNotFoundError, ValueError):
            pv = ParamValue(value)
        self.set_param_value(name, pv)

    def _set_param_value_param(self, name: str, param: str, value: str) -> None:
        pv = modify(self.get_param_value(name), set_param(param, value))
        self.set_param_value(name, pv)

    def get_content_type(self) -> ParamValue:
        return self.get_param_value(CONTENT_TYPE)

    def set_content_type(self, value: ParamValue) -> None:
        self.set_param_value(CONTENT_TYPE, value)

    def get_media_type(self) -> str:
        return self.get_content_type().media_type

    def set_media_type(self, media_type: str) -> None:
        """
        Set the media type, keeping any existing Content-Type parameters.

        The field is created when missing; duplicates are removed.
        """
        self._set_param_value_value(CONTENT_TYPE, media_type)

    def get_type(self) -> str:
        return self.get_content_type().type

    def get_subtype(self) -> str:
        return self.get_content_type().subtype

    def get_charset(self) -> str:
        """
        Charset parameter of the Content-Type.

        Raises:
            FieldNotFoundError: If there is no Content-Type
            ParameterNotFoundError: If the charset parameter is not set
        """
        return self.get_content_type().parameter(CHARSET)

    def set_charset(self, charset: str) -> None:
        """
        Set the charset on an existing Content-Type.

        Raises:
            FieldNotFoundError: If there is no Content-Type
        """
        self._set_param_value_param(CONTENT_TYPE, CHARSET, charset)

    def get_boundary(self) -> str:
        """
        Boundary parameter of the Content-Type.

        Raises:
            FieldNotFoundError: If there is no Content-Type
            ParameterNotFoundError: If the boundary parameter is not set
        """
        return self.get_content_type().parameter(BOUNDARY)

    def set_boundary(self, boundary: str) -> None:
        self._set_param_value_param(CONTENT_TYPE, BOUNDARY, boundary)

    def get_content_disposition(self) -> ParamValue:
        return self.get_param_value(CONTENT_DISPOSITION)

    def set_content_disposition(self, value: ParamValue) -> None:
        self.set_param_value(CONTENT_DISPOSITION, value)

    def get_presentation(self) -> str:
        return self.get_content_disposition().presentation

    def set_presentation(self, presentation: str) -> None:
        self._set_param_value_value(CONTENT_DISPOSITION, presentation)

    def get_filename(self) -> str:
        return self.get_content_disposition().parameter(FILENAME)

    def set_filename(self, filename: str) -> None:
        self._set_param_value_param(CONTENT_DISPOSITION, FILENAME, filename)

    # keywords and comments

    def get_keywords_list(self, name: str) -> List[str]:
        """
        Collect the comma separated keywords of every field with the given name.

        Raises:
            FieldNotFoundError: If the field is missing
        """
        found, value = self._cached(name, "keywords")
        if not found:
            keywords = []
            for body in self.get_all(name):
                keywords.extend(k.strip() for k in body.split(",") if k.strip())
            value = tuple(keywords)
            self._store(name, "keywords", value)
        return list(value)

    def set_keywords_list(self, name: str, keywords: Iterable[str]) -> None:
        """Replace every field with the given name by one field listing the keywords."""
        value = tuple(keywords)
        self.set(name, ", ".join(value))
        self._store(name, "keywords", value)

    def get_keywords(self) -> List[str]:
        return self.get_keywords_list(KEYWORDS)

    def set_keywords(self, *keywords: str) -> None:
        self.set_keywords_list(KEYWORDS, keywords)

    def get_all_comments(self) -> List[str]:
        return self.get_all(COMMENTS)

    def set_all_comments(self, *comments: str) -> None:
        self.set_all(COMMENTS, comments)

    # other well-known fields

    def get_subject(self) -> str:
        return self.get(SUBJECT)

    def set_subject(self, subject: str) -> None:
        self.set(SUBJECT, subject)

    def get_message_id(self) -> str:
        return self.get(MESSAGE_ID)

    def set_message_id(self, message_id: str) -> None:
        self.set(MESSAGE_ID, message_id)

    def get_references(self) -> str:
        return self.get(REFERENCES)

    def set_references(self, references: str) -> None:
        self.set(REFERENCES, references)

    def get_in_reply_to(self) -> str:
        return self.get(IN_REPLY_TO)

    def set_in_reply_to(self, in_reply_to: str) -> None:
        self.set(IN_REPLY_TO, in_reply_to)

    def get_transfer_encoding(self) -> str:
        return self.get(CONTENT_TRANSFER_ENCODING)

    def set_transfer_encoding(self, encoding: str) -> None:
        self.set(CONTENT_TRANSFER_ENCODING, encoding)


def parse_header(data: bytes, lb: Break, charsets: Optional[CharsetRegistry] = None) -> Header:
    """Shortcut for Header.parse()."""
    return Header.parse(data, lb, charsets)
