"""Tests for Content-Transfer-Encoding codecs."""

import io

import pytest

from mailround.models.line_break import Break
from mailround.services.header.header import Header
from mailround.services.transfer import (
    AS_IS,
    BASE64,
    Base64Decoder,
    Base64Encoder,
    QuotedPrintableDecoder,
    QuotedPrintableEncoder,
    TransferEncodeError,
    apply_transfer_decoding,
    apply_transfer_encoding,
    new_default_transfer_registry,
)


def encode(encoder_cls, data: bytes, lb: Break = Break.LF, chunk: int = 7) -> bytes:
    sink = io.BytesIO()
    with encoder_cls(sink, lb) as encoder:
        for i in range(0, len(data), chunk):
            encoder.write(data[i : i + chunk])
    return sink.getvalue()


def decode(decoder_cls, data: bytes) -> bytes:
    return decoder_cls(io.BytesIO(data)).read()


class TestBase64:
    """Test the base64 codec."""

    def test_short(self):
        """Test a short body encodes on one line without a trailing break."""
        assert encode(Base64Encoder, b"Hello World!") == b"SGVsbG8gV29ybGQh"

    def test_line_length(self):
        """Test encoded lines are 76 bytes with the given break between them."""
        encoded = encode(Base64Encoder, bytes(range(256)) * 3, Break.CRLF)
        lines = encoded.split(b"\r\n")
        assert all(len(line) == 76 for line in lines[:-1])
        assert 0 < len(lines[-1]) <= 76

    def test_round_trip(self):
        """Test decoding gives back the input."""
        data = bytes(range(256)) * 5
        assert decode(Base64Decoder, encode(Base64Encoder, data)) == data

    def test_decoder_ignores_breaks(self):
        """Test line breaks and stray whitespace are skipped."""
        assert decode(Base64Decoder, b"SGVs\r\nbG8g\n V29y bGQh\n") == b"Hello World!"

    def test_decoder_adds_padding(self):
        """Test missing padding at the end is tolerated."""
        assert decode(Base64Decoder, b"SGk") == b"Hi"

    def test_write_after_close(self):
        """Test writing to a closed encoder raises."""
        encoder = Base64Encoder(io.BytesIO())
        encoder.close()
        with pytest.raises(TransferEncodeError):
            encoder.write(b"x")


class TestQuotedPrintable:
    """Test the quoted-printable codec."""

    def test_escapes(self):
        """Test non-ASCII bytes and equals signs are escaped."""
        assert encode(QuotedPrintableEncoder, "café = ok".encode("utf-8")) == b"caf=C3=A9 =3D ok"

    def test_keeps_line_breaks(self):
        """Test hard line breaks are kept as they were."""
        assert encode(QuotedPrintableEncoder, b"a\r\nb\nc") == b"a\r\nb\nc"

    def test_soft_breaks(self):
        """Test long lines get soft breaks."""
        encoded = encode(QuotedPrintableEncoder, b"x" * 200)
        assert all(len(line) <= 76 for line in encoded.split(b"\n"))
        assert b"=\n" in encoded

    def test_round_trip(self):
        """Test decoding gives back the input."""
        data = "Grüße aus Köln\r\n".encode("utf-8") * 20 + b"\ttab end "
        assert decode(QuotedPrintableDecoder, encode(QuotedPrintableEncoder, data)) == data


class TestTransferRegistry:
    """Test the encoding registry."""

    def test_defaults(self):
        """Test the RFC 2045 encodings are registered."""
        registry = new_default_transfer_registry()
        assert registry.names() == ["", "7bit", "8bit", "base64", "binary", "quoted-printable"]
        assert registry.lookup("BASE64") is BASE64
        assert registry.lookup("7Bit") is AS_IS
        assert registry.lookup("x-uuencode") is None

    def test_copy_is_independent(self):
        """Test changing a copy leaves the original alone."""
        registry = new_default_transfer_registry()
        copy = registry.copy()
        copy.unregister("base64")
        assert registry.lookup("base64") is BASE64
        assert copy.lookup("base64") is None


class TestApplyTransferEncoding:
    """Test picking the codec from a header."""

    @pytest.fixture
    def header(self):
        """Header of a base64 leaf."""
        header = Header()
        header.set_media_type("text/plain")
        header.set_transfer_encoding("Base64")
        return header

    def test_decoding(self, header):
        """Test the body is decoded per the header."""
        reader = apply_transfer_decoding(header, io.BytesIO(b"SGVsbG8gV29ybGQh"))
        assert reader.read() == b"Hello World!"

    def test_encoding(self, header):
        """Test the body is encoded per the header."""
        sink = io.BytesIO()
        with apply_transfer_encoding(header, sink) as encoder:
            encoder.write(b"Hello World!")
        assert sink.getvalue() == b"SGVsbG8gV29ybGQh"

    def test_no_encoding_passes_through(self):
        """Test a header without the field leaves bytes alone."""
        reader = io.BytesIO(b"plain")
        assert apply_transfer_decoding(Header(), reader) is reader

    def test_unknown_encoding_passes_through(self, header):
        """Test an unknown encoding leaves bytes alone."""
        header.set_transfer_encoding("x-unknown")
        reader = io.BytesIO(b"plain")
        assert apply_transfer_decoding(header, reader) is reader

    def test_multipart_not_decoded(self, header):
        """Test multipart bodies are never decoded as a whole."""
        header.set_media_type("multipart/mixed")
        reader = io.BytesIO(b"--b\n")
        assert apply_transfer_decoding(header, reader) is reader
