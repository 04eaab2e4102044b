"""Address value types used by address-list header fields."""

from dataclasses import dataclass, field
from email.utils import quote
from typing import Iterable, Tuple, Union

# RFC 5322 specials that force a display name into a quoted-string
_SPECIALS = set('()<>[]:;@\\,."')


def _format_display_name(name: str) -> str:
    if any(c in _SPECIALS for c in name):
        return f'"{quote(name)}"'
    return name


@dataclass(frozen=True)
class AddrSpec:
    """
    The local-part@domain portion of a mailbox.

    Attributes:
        local_part: Text before the @ (the whole token when there is no @)
        domain: Text after the @, empty if the address had none
    """

    local_part: str
    domain: str = ""

    def __str__(self) -> str:
        if self.domain:
            return f"{self.local_part}@{self.domain}"
        return self.local_part


@dataclass(frozen=True)
class Mailbox:
    """
    A single mailbox, optionally with a display name and a comment.

    Attributes:
        display_name: Phrase shown before the address (may be empty)
        addr_spec: Parsed local-part and domain
        comment: Text of any parenthesized comment found while parsing
        original: The source text this mailbox was parsed from, if any
    """

    display_name: str
    addr_spec: AddrSpec
    comment: str = ""
    original: str = field(default="", compare=False)

    @classmethod
    def from_address(cls, address: str, display_name: str = "", comment: str = "") -> "Mailbox":
        """
        Build a mailbox from an address string such as "user@example.com".

        Examples:
            >>> str(Mailbox.from_address("user@example.com", "User"))
            'User <user@example.com>'
        """
        local, sep, domain = address.rpartition("@")
        if not sep:
            return cls(display_name, AddrSpec(address), comment)
        return cls(display_name, AddrSpec(local, domain), comment)

    @property
    def address(self) -> str:
        return str(self.addr_spec)

    @property
    def local_part(self) -> str:
        return self.addr_spec.local_part

    @property
    def domain(self) -> str:
        return self.addr_spec.domain

    def __str__(self) -> str:
        if self.display_name:
            out = f"{_format_display_name(self.display_name)} <{self.address}>"
        else:
            out = self.address
        if self.comment:
            out += f" ({self.comment})"
        return out


@dataclass(frozen=True)
class Group:
    """
    A named group of mailboxes, e.g. "Team: a@example.com, b@example.com;".

    Produced by the heuristic address-list parser; the strict parser only
    accepts mailboxes.

    Attributes:
        display_name: Name of the group
        mailboxes: Members of the group (may be empty)
    """

    display_name: str
    mailboxes: Tuple[Mailbox, ...] = ()

    def __str__(self) -> str:
        members = ", ".join(str(m) for m in self.mailboxes)
        return f"{_format_display_name(self.display_name)}: {members};"


Address = Union[Mailbox, Group]


def format_address_list(addresses: Iterable[Address]) -> str:
    """
    Render addresses as a comma separated field body.

    Examples:
        >>> format_address_list([Mailbox.from_address("a@example.com"),
        ...                      Mailbox.from_address("b@example.com", "B")])
        'a@example.com, B <b@example.com>'
    """
    return ", ".join(str(a) for a in addresses)
