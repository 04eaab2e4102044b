"""Tests for typed header access."""

from datetime import datetime, timedelta, timezone

import pytest

from mailround.models.address import Mailbox
from mailround.models.line_break import Break
from mailround.models.param_value import ParameterNotFoundError, ParamValue
from mailround.services.header.base import (
    AddressParseError,
    BadStartError,
    FieldNotFoundError,
    TimeParseError,
    TooManyFieldsError,
    WrongAddressTypeError,
)
from mailround.services.header.header import Header, parse_header


def parsed(data: bytes) -> Header:
    return parse_header(data, Break.LF)


class TestHeaderParse:
    """Test parsing and writing back headers."""

    def test_single_field_round_trip(self):
        """Test a one-field header reads and writes back unchanged."""
        header = parsed(b"Subject: test\n")
        assert [(f.name, f.body) for f in header] == [("Subject", "test")]
        assert bytes(header) == b"Subject: test\n\n"

    def test_encoded_subject(self):
        """Test encoded words are decoded and the raw bytes kept."""
        data = b"Subject: =?utf-8?Q?Andrew=2C_you=27ve_got_Smart_Matches=E2=84=A2=21?=\nMime-Version: 1.0\n"
        header = parsed(data)
        assert header.get("Subject") == "Andrew, you've got Smart Matches™!"
        assert bytes(header) == data + b"\n"

    def test_long_raw_line_not_refolded(self):
        """Test unchanged long fields are not folded on output."""
        data = b"References: " + b"<id@example.com> " * 20 + b"\n"
        assert bytes(parsed(data)) == data + b"\n"

    def test_bad_start_keeps_fields(self):
        """Test junk before the first field is reported with the parsed header."""
        with pytest.raises(BadStartError) as exc_info:
            parsed(b"junk line\nSubject: ok\n")
        assert exc_info.value.bad_start == b"junk line\n"
        assert exc_info.value.header.get_subject() == "ok"

    def test_changed_field_written_plainly(self):
        """Test a changed field is re-emitted while others stay as read."""
        header = parsed(b"subject:   old\nTo:  a@example.com\n")
        header.set_subject("new")
        assert bytes(header) == b"subject: new\nTo:  a@example.com\n\n"


class TestHeaderValues:
    """Test getting and setting plain field bodies."""

    @pytest.fixture
    def header(self):
        """Header with a duplicated Subject."""
        return parsed(b"Subject: one\nSubject: two\nMessage-ID: <x@example.com>\n")

    def test_get_missing(self, header):
        """Test a missing field raises FieldNotFoundError."""
        with pytest.raises(FieldNotFoundError):
            header.get("To")
        with pytest.raises(FieldNotFoundError):
            header.get_all("To")

    def test_too_many_carries_first_value(self, header):
        """Test a duplicated field raises with the first body attached."""
        with pytest.raises(TooManyFieldsError) as exc_info:
            header.get_subject()
        assert exc_info.value.value == "one"

    def test_set_replaces_duplicates(self, header):
        """Test set keeps one field in the place of the first."""
        header.set_subject("three")
        assert header.get_all("subject") == ["three"]
        assert header.get_field(0).name == "Subject"

    def test_set_appends_missing(self, header):
        """Test set appends a field that is not present."""
        header.set("In-Reply-To", "<y@example.com>")
        assert header.get_field(len(header) - 1).name == "In-Reply-To"
        assert header.get_in_reply_to() == "<y@example.com>"

    def test_set_all(self, header):
        """Test set_all makes the field count match the bodies."""
        header.set_all("Subject", ["a", "b", "c"])
        assert header.get_all("Subject") == ["a", "b", "c"]
        header.set_all("Subject", ["z"])
        assert header.get_all("Subject") == ["z"]

    def test_message_id(self, header):
        """Test the Message-ID accessor ignores case."""
        assert header.get_message_id() == "<x@example.com>"

    def test_clone_keeps_values(self, header):
        """Test a clone is independent of the original."""
        copy = header.clone()
        copy.set_subject("changed")
        assert header.get_all("Subject") == ["one", "two"]


class TestHeaderDates:
    """Test date fields and the parsed value cache."""

    def test_get_date(self):
        """Test the Date field is parsed."""
        header = parsed(b"Date: Fri, 21 Nov 1997 09:55:06 -0600\n")
        assert header.get_date() == datetime(1997, 11, 21, 9, 55, 6, tzinfo=timezone(timedelta(hours=-6)))

    def test_set_time_is_cached(self):
        """Test a set date is returned as given, without re-parsing."""
        header = Header()
        value = datetime(2006, 1, 2, 15, 4, 5, 123456, tzinfo=timezone.utc)
        header.set_date(value)
        assert header.get("Date") == "Mon, 02 Jan 2006 15:04:05 +0000"
        assert header.get_date() is value

    def test_cache_follows_field_edits(self):
        """Test editing a field directly is seen by the typed getter."""
        header = Header()
        header.set_date(datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc))
        header.get_field(0).set_body("Tue, 03 Jan 2006 10:00:00 +0000")
        assert header.get_date().day == 3

    def test_bad_date(self):
        """Test an unparseable date raises TimeParseError."""
        header = parsed(b"Date: someday\n")
        with pytest.raises(TimeParseError):
            header.get_date()

    def test_duplicate_date_value(self):
        """Test a duplicated Date reports the first date parsed."""
        header = parsed(b"Date: 2 Jan 2006 15:04:05 +0000\nDate: 3 Jan 2006 15:04:05 +0000\n")
        with pytest.raises(TooManyFieldsError) as exc_info:
            header.get_date()
        assert exc_info.value.value.day == 2


class TestHeaderAddresses:
    """Test address-list fields."""

    def test_empty_to(self):
        """Test an empty To field gives no addresses and no error."""
        assert parsed(b"To: \n").get_address_list("To") == []

    def test_all_address_lists(self):
        """Test addresses from repeated fields are returned per field, in order."""
        header = parsed(
            b"Delivered-To: one@example.com\n"
            b"Delivered-To: two@example.com, three@example.com\n"
        )
        lists = header.get_all_address_lists("Delivered-To")
        addresses = [a.address for al in lists for a in al]
        assert addresses == ["one@example.com", "two@example.com", "three@example.com"]

    def test_set_to_strings(self):
        """Test address strings are parsed strictly and re-rendered."""
        header = Header()
        header.set_to("Bob <bob@example.com>", "carol@example.com")
        assert header.get("To") == "Bob <bob@example.com>, carol@example.com"
        assert [a.address for a in header.get_to()] == ["bob@example.com", "carol@example.com"]

    def test_set_from_mailbox(self):
        """Test address objects are accepted as they are."""
        header = Header()
        header.set_from(Mailbox.from_address("sterling@example.com"))
        assert header.get("From") == "sterling@example.com"

    def test_set_address_rejects_other_types(self):
        """Test a value that is not an address raises WrongAddressTypeError."""
        with pytest.raises(WrongAddressTypeError):
            Header().set_cc(42)

    def test_set_address_rejects_bad_string(self):
        """Test a string that does not parse raises AddressParseError and changes nothing."""
        header = Header()
        with pytest.raises(AddressParseError):
            header.set_bcc("@@@")
        assert len(header) == 0

    def test_heuristic_fallback(self):
        """Test badly formed lists are still split into addresses."""
        header = parsed(b"Reply-To: Bob bob@example.com (work), test\n")
        addresses = header.get_reply_to()
        assert [a.address for a in addresses] == ["bob@example.com", "test"]
        assert addresses[0].comment == "work"


class TestHeaderContentType:
    """Test Content-Type and Content-Disposition accessors."""

    @pytest.fixture
    def header(self):
        """Header with a text Content-Type."""
        return parsed(b"Content-Type: text/plain; charset=UTF-8\n")

    def test_media_type_parts(self, header):
        """Test the media type is split into type and subtype."""
        assert header.get_media_type() == "text/plain"
        assert header.get_type() == "text"
        assert header.get_subtype() == "plain"
        assert header.get_charset() == "UTF-8"

    def test_set_media_type_keeps_params(self, header):
        """Test changing the media type keeps the parameters."""
        header.set_media_type("text/html")
        assert header.get("Content-Type") == "text/html; charset=UTF-8"

    def test_set_media_type_creates_field(self):
        """Test the media type setter adds a missing Content-Type."""
        header = Header()
        header.set_media_type("multipart/alternative")
        header.set_boundary("testing")
        assert header.get("Content-type") == "multipart/alternative; boundary=testing"

    def test_missing_boundary(self, header):
        """Test a missing parameter raises ParameterNotFoundError."""
        with pytest.raises(ParameterNotFoundError):
            header.get_boundary()

    def test_set_param_without_field(self):
        """Test parameters cannot be set without a Content-Type."""
        with pytest.raises(FieldNotFoundError):
            Header().set_charset("UTF-8")

    def test_disposition(self):
        """Test presentation and filename accessors."""
        header = Header()
        header.set_presentation("attachment")
        header.set_filename("micro.pdf")
        assert header.get("Content-disposition") == "attachment; filename=micro.pdf"
        assert header.get_presentation() == "attachment"
        assert header.get_filename() == "micro.pdf"

    def test_content_type_value(self, header):
        """Test the full parameterized value can be replaced."""
        header.set_content_type(ParamValue("image/png", {"name": "a b.png"}))
        assert header.get("Content-Type") == 'image/png; name="a b.png"'

    def test_transfer_encoding(self):
        """Test the Content-Transfer-Encoding accessor."""
        header = Header()
        header.set_transfer_encoding("base64")
        assert header.get_transfer_encoding() == "base64"


class TestHeaderKeywords:
    """Test keyword and comment fields."""

    def test_keywords_across_fields(self):
        """Test keywords from every Keywords field are collected."""
        header = parsed(b"Keywords: a, b\nKeywords: c\n")
        assert header.get_keywords() == ["a", "b", "c"]

    def test_set_keywords(self):
        """Test setting keywords leaves one field."""
        header = parsed(b"Keywords: a, b\nKeywords: c\n")
        header.set_keywords("x", "y")
        assert header.get_all("Keywords") == ["x, y"]
        assert header.get_keywords() == ["x", "y"]

    def test_comments(self):
        """Test each comment gets its own field."""
        header = Header()
        header.set_all_comments("first", "second")
        assert header.get_all_comments() == ["first", "second"]
