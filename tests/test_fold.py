"""Tests for header line folding and unfolding."""

import pytest

from mailround.config.parser_config import DO_NOT_FOLD_ENCODING, FoldEncoding
from mailround.models.line_break import Break
from mailround.services.header.fold import fold, unfold


@pytest.fixture
def narrow():
    """Fold rules small enough to exercise every branch."""
    return FoldEncoding(indent=" ", preferred_fold_length=10, forced_fold_length=20)


class TestFold:
    """Test folding a single field line."""

    def test_short_line_is_terminated_only(self, narrow):
        """Test a line within the preferred length is left alone."""
        assert fold(narrow, b"To: a@b", Break.LF) == b"To: a@b\n"

    def test_folds_at_whitespace(self, narrow):
        """Test folding breaks before whitespace."""
        folded = fold(narrow, b"Subject: hello world foo", Break.LF)
        assert folded == b"Subject: hello\n world foo\n"

    def test_unbreakable_token_within_forced(self, narrow):
        """Test a token with no whitespace is kept if it fits the forced length."""
        assert fold(narrow, b"Subject: abc", Break.LF) == b"Subject: abc\n"

    def test_hard_split_at_forced_length(self, narrow):
        """Test a run with no whitespace is split at exactly the forced length."""
        line = b"Subject: " + b"x" * 30
        folded = fold(narrow, line, Break.LF)
        first, second, _ = folded.split(b"\n")
        assert first == b"Subject: " + b"x" * 11
        assert len(first) == 20
        assert second == b" " + b"x" * 19

    def test_every_line_within_forced(self, narrow):
        """Test no physical line exceeds the forced length."""
        line = b"Received: from a.example.com by b.example.com with ESMTP id abcdefghijklmnop"
        for physical in fold(narrow, line, Break.LF).split(b"\n"):
            assert len(physical) <= 20

    def test_uses_given_break(self, narrow):
        """Test folded lines use the requested line break."""
        folded = fold(narrow, b"Subject: hello world foo", Break.CRLF)
        assert folded == b"Subject: hello\r\n world foo\r\n"

    def test_do_not_fold(self):
        """Test the no-fold encoding never wraps."""
        line = b"Subject: " + b"word " * 100
        assert fold(DO_NOT_FOLD_ENCODING, line, Break.LF) == line + b"\n"

    def test_fold_then_unfold_restores_line(self):
        """Test unfolding a whitespace fold gives back the original line."""
        encoding = FoldEncoding(preferred_fold_length=20, forced_fold_length=40)
        line = b"Subject: the quick brown fox jumps over the lazy dog again and again"
        folded = fold(encoding, line, Break.LF)
        assert b"\n " in folded
        assert unfold(folded) == line


class TestUnfold:
    """Test joining folded lines."""

    def test_unfold_mixed_whitespace(self):
        """Test each break plus whitespace collapses to the first whitespace byte."""
        assert unfold(b"a\n b\n\tc\n d\n") == b"a b\tc d"

    def test_unfold_crlf(self):
        """Test CRLF folds unfold too."""
        assert unfold(b"a\r\n  b") == b"a b"

    def test_bare_breaks_removed(self):
        """Test breaks not followed by whitespace are dropped."""
        assert unfold(b"a\nb\r\n") == b"ab"
