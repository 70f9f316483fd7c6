"""
Tests for the receive-side LineBuffer
"""

import pytest

from twitch_chat.errors import LineOverflowError
from twitch_chat.irc.framing import LineBuffer


class TestLineBuffer:
    """Test LineBuffer framing and decoding"""

    @pytest.fixture
    def buf(self):
        return LineBuffer(1024)

    def test_n_lines_in_one_pass(self, buf):
        data = b"".join(f"line {i}\r\n".encode() for i in range(5))
        assert buf.feed(data) == [f"line {i}" for i in range(5)]
        assert buf.carried == 0

    def test_bare_newlines_and_empty_lines(self, buf):
        assert buf.feed(b"a\n\r\nb\n\n") == ["a", "b"]

    def test_line_spanning_two_reads(self, buf):
        assert buf.feed(b":tmi PRIVMSG #room :hel") == []
        assert buf.carried == len(b":tmi PRIVMSG #room :hel")
        assert buf.feed(b"lo world\r\nnext") == [":tmi PRIVMSG #room :hello world"]
        assert buf.feed(b"\r\n") == ["next"]

    def test_crlf_split_between_reads(self, buf):
        assert buf.feed(b"PING :tmi\r") == []
        assert buf.feed(b"\n") == ["PING :tmi"]

    def test_multibyte_character_split_between_reads(self, buf):
        encoded = "héllo ✓\r\n".encode("utf-8")
        cut = encoded.index("✓".encode("utf-8")) + 1
        assert buf.feed(encoded[:cut]) == []
        assert buf.feed(encoded[cut:]) == ["héllo ✓"]

    def test_malformed_bytes_are_replaced(self, buf):
        lines = buf.feed(b"bad \xff\xfe bytes\r\nok\r\n")
        assert lines == ["bad �� bytes", "ok"]

    def test_empty_feed(self, buf):
        assert buf.feed(b"") == []

    def test_free_capacity_tracks_carried_tail(self, buf):
        buf.feed(b"abc")
        assert buf.free_capacity == 1021
        buf.reset()
        assert buf.free_capacity == 1024

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            LineBuffer(0)


class TestLineBufferOverflow:
    """Test oversized line handling"""

    def test_overflow_raises_and_keeps_completed_lines(self):
        buf = LineBuffer(16)
        with pytest.raises(LineOverflowError) as exc_info:
            buf.feed(b"ok\r\n" + b"x" * 16)
        assert exc_info.value.data["lines"] == ["ok"]
        assert exc_info.value.data["discarded"] == 16
        assert buf.carried == 0

    def test_rest_of_oversized_line_is_skipped(self):
        buf = LineBuffer(16)
        with pytest.raises(LineOverflowError):
            buf.feed(b"y" * 16)
        assert buf.feed(b"yyyy") == []
        assert buf.feed(b"yy\r\nfresh\r\n") == ["fresh"]

    def test_line_just_under_capacity_is_kept(self):
        buf = LineBuffer(16)
        assert buf.feed(b"z" * 15) == []
        assert buf.feed(b"\n") == ["z" * 15]
