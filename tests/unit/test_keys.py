"""Unit tests for terminal key decoding."""

from termfeed.tui.keys import decode_key, decode_utf8


def _reader(pending: str):
    chars = list(pending)
    return lambda: chars.pop(0) if chars else None


class TestDecodeKey:
    """Tests for decode_key."""

    def test_printable(self):
        """Test printable characters decode to themselves."""
        assert decode_key("q", _reader("")) == "q"
        assert decode_key("C", _reader("")) == "C"
        assert decode_key(" ", _reader("")) == " "

    def test_control_keys(self):
        """Test enter, tab and backspace bytes get their names."""
        assert decode_key("\r", _reader("")) == "enter"
        assert decode_key("\t", _reader("")) == "tab"
        assert decode_key("\x7f", _reader("")) == "backspace"

    def test_arrows(self):
        """Test arrow escape sequences decode to up and down."""
        assert decode_key("\x1b", _reader("[A")) == "up"
        assert decode_key("\x1b", _reader("[B")) == "down"

    def test_paging_and_home(self):
        """Test paging, home, end and shift+tab sequences."""
        assert decode_key("\x1b", _reader("[5~")) == "pageup"
        assert decode_key("\x1b", _reader("[6~")) == "pagedown"
        assert decode_key("\x1b", _reader("[H")) == "home"
        assert decode_key("\x1b", _reader("OF")) == "end"
        assert decode_key("\x1b", _reader("[Z")) == "shift+tab"

    def test_lone_escape(self):
        """Test escape with nothing following is esc."""
        assert decode_key("\x1b", _reader("")) == "esc"

    def test_unknown_sequence_is_escape(self):
        """Test an unrecognised sequence falls back to esc."""
        assert decode_key("\x1b", _reader("[15~")) == "esc"

    def test_sequence_stops_at_terminator(self):
        """Test keys typed after a sequence are left unread."""
        pending = list("[Ax")
        key = decode_key("\x1b", lambda: pending.pop(0) if pending else None)

        assert key == "up"
        assert pending == ["x"]


def _byte_reader(pending: bytes):
    chunks = [bytes([b]) for b in pending]
    return lambda: chunks.pop(0) if chunks else None


class TestDecodeUtf8:
    """Tests for assembling characters from raw terminal bytes."""

    def test_ascii(self):
        """Test a single-byte character needs no further reads."""
        assert decode_utf8(b"q", _byte_reader(b"x")) == "q"

    def test_two_byte_character(self):
        """Test a continuation byte is read to complete an accented letter."""
        assert decode_utf8(b"\xc3", _byte_reader(b"\xa9")) == "é"

    def test_three_byte_character(self):
        """Test every continuation byte of a three-byte character is read."""
        read_more = _byte_reader(b"\x82\xacz")

        assert decode_utf8(b"\xe2", read_more) == "€"
        assert read_more() == b"z"

    def test_truncated_sequence(self):
        """Test a lead byte with no continuation decodes to nothing."""
        assert decode_utf8(b"\xc3", _byte_reader(b"")) == ""

    def test_stray_continuation_byte(self):
        """Test a continuation byte on its own decodes to nothing."""
        assert decode_utf8(b"\xa9", _byte_reader(b"")) == ""
