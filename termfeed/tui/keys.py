"""Keyboard decoding for the terminal UI.

The terminal is put in cbreak mode and polled with select(), so the main
loop can wake up on a timeout to animate and expire messages even when no
key is pressed.
"""

import codecs
import os
import select
import sys
import termios
import tty
from typing import Callable, Optional

ESCAPE_SEQUENCES = {
    "[A": "up",
    "[B": "down",
    "[C": "right",
    "[D": "left",
    "[Z": "shift+tab",
    "[5~": "pageup",
    "[6~": "pagedown",
    "[H": "home",
    "[1~": "home",
    "OH": "home",
    "[F": "end",
    "[4~": "end",
    "OF": "end",
}

SINGLE_KEYS = {
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\b": "backspace",
}


def decode_key(first: str, read_more: Callable[[], Optional[str]]) -> str:
    """Turn raw terminal input into a key name.

    Args:
        first: The first character read
        read_more: Returns the next pending character, or None if nothing
            more is waiting (used to collect escape sequences)
    """
    if first in SINGLE_KEYS:
        return SINGLE_KEYS[first]
    if first != "\x1b":
        return first

    sequence = ""
    while True:
        ch = read_more()
        if not ch:
            break
        sequence += ch
        # The first character is the "[" or "O" introducer.
        if len(sequence) > 1 and (sequence[-1].isalpha() or sequence[-1] == "~"):
            break
        if len(sequence) >= 6:
            break

    if not sequence:
        return "esc"
    return ESCAPE_SEQUENCES.get(sequence, "esc")


def decode_utf8(first: bytes, read_more: Callable[[], Optional[bytes]]) -> str:
    """Decode one character whose first byte is ``first``.

    Continuation bytes of a multi-byte character are pulled from
    ``read_more``. Invalid or truncated input decodes to an empty string.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="ignore")
    text = decoder.decode(first)
    while not text and decoder.getstate()[0]:
        more = read_more()
        if not more:
            return ""
        text = decoder.decode(more)
    return text


class KeyReader:
    """Context manager that reads single keys from the controlling terminal."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.fd = self.stream.fileno()
        self._saved = None

    def __enter__(self) -> "KeyReader":
        self._saved = termios.tcgetattr(self.fd)
        tty.setcbreak(self.fd)
        return self

    def __exit__(self, *exc_info) -> None:
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def _read_byte(self, timeout: float) -> Optional[bytes]:
        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return None
        return os.read(self.fd, 1) or None

    def _read_char(self, timeout: float) -> Optional[str]:
        first = self._read_byte(timeout)
        if first is None:
            return None
        return decode_utf8(first, lambda: self._read_byte(0.01)) or None

    def read_key(self, timeout: float) -> Optional[str]:
        """Wait up to ``timeout`` seconds for a key. None if nothing was pressed."""
        first = self._read_char(timeout)
        if not first:
            return None
        return decode_key(first, lambda: self._read_char(0.001))
