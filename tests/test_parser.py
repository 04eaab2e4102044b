"""Tests for the message parser."""

import io
from collections import Counter
from pathlib import Path

import pytest

from mailround.config.parser_config import ParserConfig
from mailround.models.line_break import Break
from mailround.services.header.base import BadStartError
from mailround.services.header.charset import new_default_registry, register_standard_charsets
from mailround.services.message import (
    EmptyPartError,
    HeaderTooLargeError,
    Multipart,
    NoBoundaryError,
    Opaque,
    ParseError,
    PartTooLargeError,
    parse,
    parse_multipart,
    parse_opaque,
)
from mailround.services.walk import iter_parts


@pytest.fixture
def complex_message():
    """Bytes of a nested multipart message with attachments."""
    return (Path(__file__).parent / "fixtures" / "messages" / "complex.eml").read_bytes()


class TestParseSimple:
    """Test parsing single-part messages."""

    def test_header_only_with_blank_line(self):
        """Test a header followed by a blank line and nothing else."""
        msg = parse(b"Subject: test\n\n")
        assert not msg.is_multipart()
        assert [(f.name, f.body) for f in msg.get_header()] == [("Subject", "test")]
        assert bytes(msg) == b"Subject: test\n\n"

    def test_encoded_subject_round_trip(self):
        """Test an encoded subject is decoded and written back unchanged."""
        data = (
            b"Subject: =?utf-8?Q?Andrew=2C_you=27ve_got_Smart_Matches=E2=84=A2=21?=\n"
            b"Mime-Version: 1.0\n\nHello"
        )
        msg = parse(data)
        assert msg.get_header().get("Subject") == "Andrew, you've got Smart Matches™!"
        assert msg.get_reader().read() == b"Hello"
        assert bytes(msg) == data

    def test_text_source(self):
        """Test a str source is accepted."""
        msg = parse("Subject: hi\n\nbody")
        assert msg.get_header().get_subject() == "hi"

    def test_crlf_message(self):
        """Test a CRLF message keeps its line break."""
        data = b"Subject: test\r\nTo: a@example.com\r\n\r\nHello\r\n"
        msg = parse(data)
        assert msg.get_header().break_ is Break.CRLF
        assert bytes(msg) == data

    def test_no_blank_line(self):
        """Test input with no blank line is a header with no body."""
        msg = parse(b"Subject: test\n")
        assert not msg.has_body()
        assert not msg.get_header().terminated
        assert msg.get_reader().read() == b""
        assert bytes(msg) == b"Subject: test\n"

    def test_no_line_break(self):
        """Test a single unterminated field is written back without a break."""
        assert bytes(parse(b"Subject: test")) == b"Subject: test"

    def test_leading_break(self):
        """Test input starting with a blank line has an empty header."""
        msg = parse(b"\nJust a body")
        assert len(msg.get_header()) == 0
        assert msg.get_reader().read() == b"Just a body"

    def test_charsets(self):
        """Test a registry can be given for encoded words."""
        registry = register_standard_charsets(new_default_registry())
        msg = parse(b"Subject: =?iso-8859-1?q?caf=E9?=\n\n", charsets=registry)
        assert msg.get_header().get_subject() == "café"

    def test_bad_start(self):
        """Test junk before the first field is reported with the parsed message."""
        with pytest.raises(ParseError) as exc_info:
            parse(b"junk\nSubject: ok\n\nbody")
        assert isinstance(exc_info.value.errors[0], BadStartError)
        assert exc_info.value.message.get_header().get_subject() == "ok"

    def test_header_too_large(self):
        """Test a header longer than the limit raises HeaderTooLargeError."""
        config = ParserConfig(max_header_length=10, chunk_size=4)
        with pytest.raises(HeaderTooLargeError):
            parse(b"Subject: a very long subject\n\nbody", config)


class TestParseMultipart:
    """Test parsing multipart messages."""

    def test_complex_tree(self, complex_message):
        """Test the nesting and attachments of a multipart message."""
        msg = parse(complex_message)
        depths = Counter(depth for depth, _, _ in iter_parts(msg))
        assert depths == {0: 1, 1: 3, 2: 2}

        filenames = [
            part.get_header().get_filename()
            for _, _, part in iter_parts(msg)
            if part.get_header().get_all_fields_named("Content-Disposition")
        ]
        assert filenames == ["micro.pdf", "att-1.gif"]

    def test_complex_round_trip(self, complex_message):
        """Test an unmodified multipart message is written back byte for byte."""
        msg = parse(complex_message)
        assert bytes(msg) == complex_message
        assert bytes(msg) == complex_message

    def test_leaf_bodies(self, complex_message):
        """Test leaf bodies exclude the delimiter line breaks."""
        msg = parse(complex_message)
        alternative = msg.get_parts()[0]
        html = alternative.get_parts()[0]
        assert html.get_header().get_media_type() == "text/html"
        assert html.get_reader().read() == b"Hello World!"

    def test_streamed_source(self, complex_message):
        """Test a non-seekable stream read in small chunks parses the same."""
        stream = io.BufferedReader(io.BytesIO(complex_message))
        msg = parse(stream, ParserConfig(chunk_size=8))
        assert bytes(msg) == complex_message

    def test_crlf_multipart(self):
        """Test a CRLF multipart body splits on CRLF delimiters."""
        data = (
            b"Content-Type: multipart/mixed; boundary=b\r\n\r\n"
            b"--b\r\nA: 1\r\n\r\none\r\n--b--\r\n"
        )
        msg = parse(data)
        (child,) = msg.get_parts()
        assert child.get_header().break_ is Break.CRLF
        assert child.get_reader().read() == b"one"
        assert bytes(msg) == data

    def test_header_only_child(self):
        """Test a child with no blank line is a header with no body."""
        data = b"Content-Type: multipart/mixed; boundary=b\n\n--b\nA: 1\n--b--"
        msg = parse(data)
        (child,) = msg.get_parts()
        assert child.get_header().get("A") == "1"
        assert not child.has_body()
        assert bytes(msg) == data

    def test_max_depth(self, complex_message):
        """Test nesting below the configured depth is left opaque."""
        msg = parse(complex_message, ParserConfig(max_depth=1))
        assert msg.is_multipart()
        assert not msg.get_parts()[0].is_multipart()
        assert bytes(msg) == complex_message

        assert not parse(complex_message, ParserConfig(max_depth=0)).is_multipart()

    def test_opaque_then_multipart(self, complex_message):
        """Test the header can be read before the body is broken down."""
        opaque = parse_opaque(complex_message)
        assert isinstance(opaque, Opaque)
        assert opaque.get_header().get_boundary() == "__boundary-one__"
        msg = parse_multipart(opaque)
        assert isinstance(msg, Multipart)
        assert len(msg.get_parts()) == 3

    def test_not_multipart_unchanged(self):
        """Test parse_multipart returns a non-multipart message as it is."""
        opaque = parse_opaque(b"Content-Type: text/plain\n\nhi")
        assert parse_multipart(opaque) is opaque

    def test_message_type_without_boundary(self):
        """Test a message/* part without a boundary stays opaque without error."""
        msg = parse(b"Content-Type: message/rfc822\n\nSubject: inner\n\nhi")
        assert not msg.is_multipart()


class TestParseErrors:
    """Test recoverable multipart problems."""

    def test_no_boundary(self):
        """Test a multipart type without a boundary raises with the opaque message."""
        data = b"Content-Type: multipart/mixed\n\nbody"
        with pytest.raises(NoBoundaryError) as exc_info:
            parse(data)
        assert isinstance(exc_info.value.message, Opaque)
        assert bytes(exc_info.value.message) == data

    def test_empty_part(self):
        """Test an empty part is reported and kept."""
        data = b"Content-Type: multipart/mixed; boundary=b\n\n--b\n\n--b\nA: 1\n\none\n--b--"
        with pytest.raises(ParseError) as exc_info:
            parse(data)
        assert [type(e) for e in exc_info.value.errors] == [EmptyPartError]
        msg = exc_info.value.message
        assert len(msg.get_parts()) == 2
        assert bytes(msg) == data

    def test_child_bad_start(self):
        """Test a child with junk before its fields is kept as raw bytes."""
        data = b"Content-Type: multipart/mixed; boundary=b\n\n--b\njunk\nA: 1\n\none\n--b--"
        with pytest.raises(ParseError) as exc_info:
            parse(data)
        assert isinstance(exc_info.value.errors[0], BadStartError)
        assert bytes(exc_info.value.message) == data

    def test_part_too_large(self):
        """Test a child over the size limit is reported and kept."""
        data = b"Content-Type: multipart/mixed; boundary=b\n\n--b\nA: 1\n\n0123456789\n--b--"
        with pytest.raises(ParseError) as exc_info:
            parse(data, ParserConfig(max_part_length=5))
        assert isinstance(exc_info.value.errors[0], PartTooLargeError)
        assert bytes(exc_info.value.message) == data

    def test_child_header_too_large(self):
        """Test a child header over the limit is reported and kept."""
        data = b"Content-Type: multipart/mixed; boundary=b\n\n--b\nA: " + b"x" * 60 + b"\n\none\n--b--"
        with pytest.raises(ParseError) as exc_info:
            parse(data, ParserConfig(max_header_length=45))
        assert isinstance(exc_info.value.errors[0], HeaderTooLargeError)


class TestTransferDecoding:
    """Test decoding leaf bodies while parsing."""

    DATA = b"Content-Type: text/plain\nContent-Transfer-Encoding: base64\n\nSGVsbG8gV29ybGQh"

    def test_decoded_reader(self):
        """Test the body reads decoded when decoding is enabled."""
        msg = parse(self.DATA, ParserConfig(decode_transfer_encoding=True))
        assert not msg.is_encoded()
        assert msg.get_reader().read() == b"Hello World!"

    def test_reencoded_on_output(self):
        """Test a decoded leaf is encoded again when written."""
        msg = parse(self.DATA, ParserConfig(decode_transfer_encoding=True))
        assert bytes(msg) == self.DATA

    def test_left_encoded_by_default(self):
        """Test bodies are left as read unless decoding is asked for."""
        msg = parse(self.DATA)
        assert msg.is_encoded()
        assert msg.get_reader().read() == b"SGVsbG8gV29ybGQh"


class TestClone:
    """Test copies of parsed messages write the same bytes."""

    FIXTURES = Path(__file__).parent / "fixtures" / "messages"

    @pytest.mark.parametrize("name", ["complex.eml", "complex_base64.eml"])
    def test_clone_of_fixture(self, name):
        """Test a cloned multipart tree writes the original bytes."""
        data = (self.FIXTURES / name).read_bytes()
        msg = parse(data)
        copy = msg.clone()
        assert bytes(copy) == data
        assert bytes(msg) == data
        assert bytes(copy.clone()) == data

    @pytest.mark.parametrize("name", ["complex.eml", "complex_base64.eml"])
    def test_clone_of_unparsed_body(self, name):
        """Test a clone of a message left opaque writes the original bytes."""
        data = (self.FIXTURES / name).read_bytes()
        msg = parse(data, ParserConfig(max_depth=0))
        assert isinstance(msg, Opaque)
        assert bytes(msg.clone()) == data
        assert bytes(msg) == data

    @pytest.mark.parametrize(
        "data",
        [
            b"Subject: test\n\nHello",
            b"Subject: test\r\nTo: a@example.com\r\n\r\nHello\r\n",
            b"Subject: only a header\n",
            b"\nJust a body",
        ],
    )
    def test_clone_of_opaque(self, data):
        """Test a cloned single-part message writes the original bytes."""
        msg = parse(data)
        assert bytes(msg.clone()) == data
        assert bytes(msg) == data

    def test_clone_is_independent(self, complex_message):
        """Test editing a clone leaves the original alone."""
        msg = parse(complex_message)
        copy = msg.clone()
        copy.get_header().set_subject("changed")
        assert bytes(msg) == complex_message
        assert bytes(copy) != complex_message
