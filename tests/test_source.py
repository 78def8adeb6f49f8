"""Unit tests for the mark/reset reader."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import io

import pytest

from textcsv.errors import UnsupportedSourceError
from textcsv.source import MarkableReader, as_markable


class TestMarkReset:

    def test_reset_replays_prefix(self):
        reader = MarkableReader(io.StringIO("abcdefgh"))
        reader.mark(10)
        assert reader.read(5) == "abcde"
        reader.reset()
        assert reader.read() == "abcdefgh"

    def test_reset_after_partial_read(self):
        reader = MarkableReader(io.StringIO("abcdefgh"))
        assert reader.read(2) == "ab"
        reader.mark(4)
        assert reader.read(3) == "cde"
        reader.reset()
        assert reader.read() == "cdefgh"

    def test_reading_exactly_the_limit_keeps_the_mark(self):
        reader = MarkableReader(io.StringIO("abcdef"))
        reader.mark(3)
        reader.read(3)
        reader.reset()
        assert reader.read() == "abcdef"

    def test_reading_past_the_limit_invalidates(self):
        reader = MarkableReader(io.StringIO("abcdef"))
        reader.mark(3)
        reader.read(4)
        with pytest.raises(UnsupportedSourceError):
            reader.reset()

    def test_reset_without_mark(self):
        with pytest.raises(UnsupportedSourceError):
            MarkableReader(io.StringIO("abc")).reset()

    def test_second_mark_cycle(self):
        reader = MarkableReader(io.StringIO("abcdef"))
        reader.mark(6)
        reader.read(2)
        reader.reset()
        reader.mark(6)
        assert reader.read(4) == "abcd"
        reader.reset()
        assert reader.read() == "abcdef"


class TestLines:

    def test_readline_keeps_line_endings(self):
        reader = MarkableReader(io.StringIO("a\r\nb\nc"))
        assert list(reader) == ["a\r\n", "b\n", "c"]

    def test_bare_cr_ends_a_line(self):
        reader = MarkableReader(io.StringIO("a\rb\r\nc\rd"))
        assert list(reader) == ["a\r", "b\r\n", "c\r", "d"]

    def test_bare_cr_lines_after_reset(self):
        reader = MarkableReader(io.StringIO("a,b\r1,2\r3,4\r"))
        reader.mark(100)
        reader.read(5)
        reader.reset()
        assert list(reader) == ["a,b\r", "1,2\r", "3,4\r"]

    def test_crlf_split_across_reads(self):
        reader = MarkableReader(io.StringIO("ab\r\ncd"))
        reader.mark(3)
        assert reader.read(3) == "ab\r"
        reader.reset()
        assert reader.readline() == "ab\r\n"
        assert reader.readline() == "cd"

    def test_readline_after_reset_spans_pushback_and_stream(self):
        reader = MarkableReader(io.StringIO("abc,def\nxyz\n"))
        reader.mark(5)
        reader.read(5)
        reader.reset()
        assert reader.readline() == "abc,def\n"
        assert reader.readline() == "xyz\n"
        assert reader.readline() == ""


class TestAsMarkable:

    def test_wraps_plain_stream(self):
        assert isinstance(as_markable(io.StringIO("x")), MarkableReader)

    def test_keeps_markable(self):
        reader = MarkableReader(io.StringIO("x"))
        assert as_markable(reader) is reader

    def test_rejects_non_stream(self):
        with pytest.raises(UnsupportedSourceError):
            as_markable(object())
