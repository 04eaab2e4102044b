"""Strict and heuristic parsing of address-list field bodies."""

import logging
import re
from typing import List, Tuple

from flanker.addresslib import address as flanker_address

from ...models.address import Address, AddrSpec, Group, Mailbox
from .base import AddressParseError

logger = logging.getLogger(__name__)

# "display-name: member, member;" within an address list
_GROUP = re.compile(r"([^,:;<>@\"()]+):([^;]*);")


def parse_address_list_strict(body: str) -> List[Address]:
    """
    Parse an RFC 5322 address list, failing on anything that is not a mailbox.

    Args:
        body: Field body

    Returns:
        List of mailboxes (empty for a blank body)

    Raises:
        AddressParseError: If any part of the body fails to parse
    """
    if not body.strip():
        return []

    parsed, unparsed = flanker_address.parse_list(body, as_tuple=True)
    if unparsed:
        raise AddressParseError(f"unable to parse address list: {body!r}")

    mailboxes: List[Address] = []
    for addr in parsed:
        if not isinstance(addr, flanker_address.EmailAddress):
            raise AddressParseError(f"not an email address: {addr}")
        mailboxes.append(
            Mailbox(
                display_name=addr.display_name or "",
                addr_spec=AddrSpec(addr.mailbox, addr.hostname),
                original=addr.full_spec(),
            )
        )
    return mailboxes


def _extract_comments(text: str) -> Tuple[str, str]:
    """Split text into (text outside parentheses, comment text)."""
    clean: List[str] = []
    comment: List[str] = []
    depth = 0
    for c in text:
        if c == "(":
            depth += 1
            if depth > 1:
                comment.append(c)
        elif c == ")":
            depth -= 1
            if depth < 0:
                # unmatched close paren stays in the text
                depth = 0
                clean.append(c)
            elif depth > 0:
                comment.append(c)
        elif depth > 0:
            comment.append(c)
        else:
            clean.append(c)
    return "".join(clean), "".join(comment)


def _parse_mailboxes_heuristic(body: str) -> List[Mailbox]:
    mailboxes: List[Mailbox] = []
    for original in body.split(","):
        text, comment = _extract_comments(original)
        words = text.split()
        if not words:
            continue

        address = words[-1].strip("<>")
        display_name = " ".join(words[:-1]).strip('"')
        local, sep, domain = address.partition("@")
        addr_spec = AddrSpec(local, domain) if sep else AddrSpec(address)

        mailboxes.append(Mailbox(display_name, addr_spec, comment.strip(), original=original))
    return mailboxes


def parse_address_list_heuristic(body: str) -> List[Address]:
    """
    Best-effort address list parse that accepts anything.

    Group syntax ("Team: a@example.com, b@example.com;") becomes a Group.
    Everything else is split on commas; each piece has its comments
    removed, the last word is the address and any words before it are the
    display name. Pieces with no words are skipped.

    Examples:
        >>> [str(a) for a in parse_address_list_heuristic("Bob bob@example.com (work), test")]
        ['Bob <bob@example.com> (work)', 'test']
    """
    addresses: List[Address] = []
    pos = 0
    for match in _GROUP.finditer(body):
        addresses.extend(_parse_mailboxes_heuristic(body[pos : match.start()]))
        display_name = match.group(1).strip()
        members = tuple(_parse_mailboxes_heuristic(match.group(2)))
        addresses.append(Group(display_name, members))
        pos = match.end()
    addresses.extend(_parse_mailboxes_heuristic(body[pos:]))
    return addresses


def parse_address_list(body: str) -> List[Address]:
    """
    Parse an address list strictly, falling back to the heuristic parser.

    This never fails; a badly formatted field yields odd but usable values.
    """
    try:
        return parse_address_list_strict(body)
    except AddressParseError:
        logger.debug("Falling back to heuristic address parsing for %r", body)
        return parse_address_list_heuristic(body)
