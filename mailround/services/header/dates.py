"""Liberal parsing of date-valued header fields."""

import logging
import re
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Optional

from .base import TimeParseError

logger = logging.getLogger(__name__)

# RFC 5322 date-time: [day-of-week ","] day month year hour ":" minute [":" second] zone
_RFC5322_DATE = re.compile(
    r"^(?:[A-Za-z]{3},\s*)?\d{1,2}\s+[A-Za-z]{3}\s+\d{2,4}\s+"
    r"\d{1,2}:\d{2}(?::\d{2})?\s+(?:[+-]\d{4}|[A-Za-z]{1,5})$"
)

# "Mon Jan 02 15:04:05 2006 MST", as written by some old Unix tools
_UNIX_DATE_WITH_EARLY_YEAR = re.compile(
    r"^([A-Za-z]{3}\s+[A-Za-z]{3}\s+\d{1,2}\s+\d{1,2}:\d{2}:\d{2}\s+\d{4})\s+([A-Za-z]{1,5})$"
)

_ZONE_OFFSETS = {
    "UT": 0,
    "UTC": 0,
    "GMT": 0,
    "Z": 0,
    "EST": -5,
    "EDT": -4,
    "CST": -6,
    "CDT": -5,
    "MST": -7,
    "MDT": -6,
    "PST": -8,
    "PDT": -7,
}

# Formats seen in the wild that the RFC parser rejects
_PERMISSIVE_FORMATS = (
    "%a, %d %b %Y %H:%M:%S %z",
    "%a, %d %b %y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M %z",
    "%d %b %Y %H:%M:%S %z",
    "%d %b %y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M:%S",
    "%d %b %Y %H:%M:%S",
    "%a %b %d %H:%M:%S %Y",
    "%a %b %d %H:%M:%S %z %Y",
    "%a, %d-%b-%Y %H:%M:%S %z",
    "%d-%b-%Y %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S %z",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S %z",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%y %H:%M:%S",
    "%d.%m.%Y %H:%M:%S %z",
    "%d.%m.%Y %H:%M:%S",
)

_TRAILING_COMMENT = re.compile(r"\s*\([^)]*\)\s*$")
_ZONE_NAME = re.compile(r"\s+([A-Za-z]{1,5})$")


def _zone(name: str) -> timezone:
    hours = _ZONE_OFFSETS.get(name.upper(), 0)
    return timezone(timedelta(hours=hours))


def _assume_utc(parsed: datetime) -> datetime:
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_strict(text: str) -> Optional[datetime]:
    if not _RFC5322_DATE.match(text):
        return None
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None


def _parse_permissive(text: str) -> Optional[datetime]:
    text = _TRAILING_COMMENT.sub("", text)
    text = " ".join(text.split())

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    zone = None
    zone_match = _ZONE_NAME.search(text)
    if zone_match and zone_match.group(1).upper() in _ZONE_OFFSETS:
        zone = _zone(zone_match.group(1))
        text = text[: zone_match.start()]

    for fmt in _PERMISSIVE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if zone is not None and parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=zone)
        return parsed

    # two-digit years, missing seconds and bare offsets are handled here
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None
    if zone is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed


def _parse_unix_date(text: str) -> Optional[datetime]:
    match = _UNIX_DATE_WITH_EARLY_YEAR.match(text)
    if not match:
        return None
    try:
        parsed = datetime.strptime(" ".join(match.group(1).split()), "%a %b %d %H:%M:%S %Y")
    except ValueError:
        return None
    return parsed.replace(tzinfo=_zone(match.group(2)))


def parse_time(body: str) -> datetime:
    """
    Parse a date field body, accepting the malformed dates common in real mail.

    Tries, in order: a strict RFC 5322 date, a set of permissive formats
    (two-digit years, missing weekday or seconds, ISO 8601, bare offsets,
    zone names), and finally "Mon Jan 02 15:04:05 2006 MST".

    Args:
        body: Field body

    Returns:
        Timezone-aware datetime; UTC is assumed when the input names no zone

    Raises:
        TimeParseError: If no format matches

    Examples:
        >>> parse_time("Fri, 21 Nov 1997 09:55:06 -0600").isoformat()
        '1997-11-21T09:55:06-06:00'
    """
    text = body.strip()

    parsed = _parse_strict(text)
    if parsed is not None:
        return _assume_utc(parsed)

    parsed = _parse_permissive(text)
    if parsed is not None:
        logger.debug("Parsed non-RFC 5322 date %r permissively", text)
        return _assume_utc(parsed)

    parsed = _parse_unix_date(text)
    if parsed is not None:
        return parsed

    raise TimeParseError(f"unable to parse date: {body!r}")


def format_time(value: datetime) -> str:
    """
    Render a datetime as an RFC 5322 date.

    Examples:
        >>> from datetime import timezone
        >>> format_time(datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc))
        'Mon, 02 Jan 2006 15:04:05 +0000'
    """
    return format_datetime(value)
