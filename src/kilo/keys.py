"""Keyboard input decoding for the raw terminal.

Turns the raw byte stream delivered by :class:`~kilo.terminal.RawTerminal`
into one :class:`KeyEvent` per keypress.  Multi-byte arrow and navigation
reports are normalised to named keys so callers never inspect escape
sequences themselves.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable

ESC = "\x1b"
BACKSPACE_BYTE = 0x7F


# ---------------------------------------------------------------------------
# Key names
# ---------------------------------------------------------------------------


class Key:
    """Named key constants."""

    up = "up"
    down = "down"
    left = "left"
    right = "right"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    delete = "delete"
    backspace = "backspace"


def ctrl_key(k: str) -> int:
    """Byte value the terminal sends for Ctrl + *k*."""
    return ord(k) & 0x1F


# ``ESC [ <digit> ~``
TILDE_SEQUENCES: dict[str, str] = {
    "1": Key.home,
    "3": Key.delete,
    "4": Key.end,
    "5": Key.page_up,
    "6": Key.page_down,
    "7": Key.home,
    "8": Key.end,
}

# ``ESC [ <letter>``
CSI_SEQUENCES: dict[str, str] = {
    "A": Key.up,
    "B": Key.down,
    "C": Key.right,
    "D": Key.left,
    "H": Key.home,
    "F": Key.end,
}

# ``ESC O <letter>``
SS3_SEQUENCES: dict[str, str] = {
    "H": Key.home,
    "F": Key.end,
}


# ---------------------------------------------------------------------------
# KeyEvent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """A decoded keypress: exactly one of *name* or *char* is set."""

    name: str | None = None
    char: str | None = None

    @classmethod
    def named(cls, name: str) -> KeyEvent:
        return cls(name=name)

    @classmethod
    def literal(cls, char: str) -> KeyEvent:
        return cls(char=char)

    @property
    def is_named(self) -> bool:
        return self.name is not None

    def is_ctrl(self, k: str) -> bool:
        return self.char is not None and ord(self.char) == ctrl_key(k)


ESCAPE = KeyEvent.literal(ESC)


# ---------------------------------------------------------------------------
# InputDecoder
# ---------------------------------------------------------------------------


class InputDecoder:
    """Reads bytes from *read_byte* and resolves them into key events.

    *read_byte* returns one byte, or ``b""`` when its timeout expired.
    """

    def __init__(self, read_byte: Callable[[], bytes]) -> None:
        self._read_byte = read_byte
        self._pending: deque[str] = deque()
        self._unread = b""

    def read_key(self) -> KeyEvent:
        """Block until a byte arrives and return the key it starts."""
        if self._pending:
            return KeyEvent.literal(self._pending.popleft())

        first, self._unread = self._unread, b""
        while not first:
            first = self._read_byte()

        c = first[0]
        if c == 0x1B:
            return self._read_escape()
        if c == BACKSPACE_BYTE:
            return KeyEvent.named(Key.backspace)
        if c >= 0x80:
            return self._read_utf8(first)
        return KeyEvent.literal(chr(c))

    def _read_escape(self) -> KeyEvent:
        seq0 = self._read_byte()
        if not seq0:
            return ESCAPE
        seq1 = self._read_byte()
        if not seq1:
            return ESCAPE

        s0 = chr(seq0[0])
        s1 = chr(seq1[0])

        if s0 == "[":
            if s1.isdigit():
                seq2 = self._read_byte()
                if not seq2:
                    return ESCAPE
                if seq2 == b"~" and s1 in TILDE_SEQUENCES:
                    return KeyEvent.named(TILDE_SEQUENCES[s1])
                return ESCAPE
            if s1 in CSI_SEQUENCES:
                return KeyEvent.named(CSI_SEQUENCES[s1])
        elif s0 == "O":
            if s1 in SS3_SEQUENCES:
                return KeyEvent.named(SS3_SEQUENCES[s1])

        return ESCAPE

    def _read_utf8(self, lead: bytes) -> KeyEvent:
        data = lead
        for _ in range(_utf8_length(lead[0]) - 1):
            b = self._read_byte()
            if not b:
                break
            if not 0x80 <= b[0] <= 0xBF:
                # Not a continuation byte: it starts the next key.
                self._unread = b
                break
            data += b

        # Undecodable bytes come through as lone surrogates, one per byte.
        text = data.decode("utf-8", errors="surrogateescape")
        self._pending.extend(text[1:])
        return KeyEvent.literal(text[0])


def decode(data: bytes) -> KeyEvent:
    """Decode the first keypress in *data*; missing bytes count as timeouts."""
    stream = iter(data)

    def _next() -> bytes:
        b = next(stream, None)
        return b"" if b is None else bytes([b])

    if not data:
        raise ValueError("no input to decode")
    return InputDecoder(_next).read_key()


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1
