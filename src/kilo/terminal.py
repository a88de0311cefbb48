"""Raw-mode terminal session for stdin/stdout interaction.

Provides ``RawTerminal``, which puts the controlling terminal into raw mode
via :mod:`termios`, reads single bytes with a bounded timeout, writes whole
frames in one call, and measures the window.  The original terminal
attributes are restored on every exit path: as a context manager, and via
an :mod:`atexit` hook for explicit ``sys.exit`` calls.
"""

from __future__ import annotations

import atexit
import errno
import logging
import os
import re
import termios

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CURSOR_HOME = "\x1b[H"
CLEAR_LINE = "\x1b[K"
CLEAR_SCREEN = "\x1b[2J"
REVERSE_VIDEO = "\x1b[7m"
RESET_ATTRIBUTES = "\x1b[m"
CURSOR_POSITION_FMT = "\x1b[{};{}H"

_CURSOR_BOTTOM_RIGHT = "\x1b[999C\x1b[999B"
_CURSOR_POSITION_QUERY = "\x1b[6n"
_CURSOR_POSITION_RE = re.compile(r"^\x1b\[(\d+);(\d+)R$")

# termios attribute list indices
_IFLAG, _OFLAG, _CFLAG, _LFLAG, _ISPEED, _OSPEED, _CC = range(7)


class TerminalError(Exception):
    """The terminal channel is unusable (attribute, read, or size failure)."""


# ---------------------------------------------------------------------------
# RawTerminal
# ---------------------------------------------------------------------------


class RawTerminal:
    """Terminal backed by raw file descriptors.

    ``enter()`` switches the input descriptor to raw mode; ``restore()``
    puts back whatever was there before.  Reads return after at most
    ``read_timeout_ds`` deciseconds even when no byte arrived.
    """

    def __init__(
        self,
        stdin_fd: int = 0,
        stdout_fd: int = 1,
        read_timeout_ds: int = 1,
    ) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.read_timeout_ds = read_timeout_ds
        self._original_termios: list | None = None

    # -- context manager ----------------------------------------------------

    def __enter__(self) -> RawTerminal:
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    # -- enter / restore ----------------------------------------------------

    @property
    def active(self) -> bool:
        return self._original_termios is not None

    def enter(self) -> None:
        """Capture the current attributes and switch to raw mode."""
        try:
            original = termios.tcgetattr(self.stdin_fd)
        except termios.error as e:
            raise TerminalError(f"tcgetattr: {_describe(e)}") from e

        self._original_termios = original
        atexit.register(self.restore)

        raw = make_raw_attributes(original, self.read_timeout_ds)
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, raw)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {_describe(e)}") from e
        logger.debug("raw mode enabled on fd %d", self.stdin_fd)

    def restore(self) -> None:
        """Reapply the captured attributes.  Safe to call more than once."""
        if self._original_termios is None:
            return
        original = self._original_termios
        self._original_termios = None
        atexit.unregister(self.restore)
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, original)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {_describe(e)}") from e
        logger.debug("terminal attributes restored on fd %d", self.stdin_fd)

    # -- input --------------------------------------------------------------

    def read_byte(self) -> bytes:
        """Read one byte, or return ``b""`` when the read timed out."""
        try:
            return os.read(self.stdin_fd, 1)
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EINTR):
                return b""
            raise TerminalError(f"read: {e.strerror}") from e

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write *data* in full, bypassing Python-level buffering."""
        buf = data.encode("utf-8", errors="surrogateescape")
        try:
            while buf:
                written = os.write(self.stdout_fd, buf)
                buf = buf[written:]
        except OSError:
            pass

    def clear_screen(self) -> None:
        self.write(CLEAR_SCREEN + CURSOR_HOME)

    # -- geometry -----------------------------------------------------------

    def window_size(self) -> tuple[int, int]:
        """Return ``(rows, columns)`` of the terminal window."""
        try:
            size = os.get_terminal_size(self.stdout_fd)
        except OSError:
            size = None

        if size is not None and size.columns > 0:
            logger.debug("window size %dx%d", size.lines, size.columns)
            return size.lines, size.columns

        # No ioctl answer: park the cursor bottom-right and ask where it is.
        self.write(_CURSOR_BOTTOM_RIGHT)
        return self.get_cursor_position()

    def get_cursor_position(self) -> tuple[int, int]:
        """Query the cursor position with a Device Status Report."""
        self.write(_CURSOR_POSITION_QUERY)

        reply = b""
        while len(reply) < 32:
            b = self.read_byte()
            if not b:
                break
            reply += b
            if b == b"R":
                break

        match = _CURSOR_POSITION_RE.match(reply.decode("ascii", errors="replace"))
        if match is None:
            raise TerminalError("get_window_size: no cursor position report")
        return int(match.group(1)), int(match.group(2))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_raw_attributes(original: list, read_timeout_ds: int = 1) -> list:
    """Return a raw-mode copy of a ``termios.tcgetattr`` attribute list.

    Echo, canonical input, signal keys, flow control, CR/NL translation,
    parity checking, break handling and output post-processing are turned
    off; characters are 8 bits; reads return after ``read_timeout_ds``
    deciseconds with zero or more bytes.
    """
    attrs = list(original)
    attrs[_IFLAG] &= ~(
        termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
    )
    attrs[_OFLAG] &= ~termios.OPOST
    attrs[_CFLAG] |= termios.CS8
    attrs[_LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)

    cc = list(attrs[_CC])
    cc[termios.VMIN] = 0
    cc[termios.VTIME] = read_timeout_ds
    attrs[_CC] = cc
    return attrs


def _describe(err: termios.error) -> str:
    if len(err.args) >= 2:
        return str(err.args[1])
    return str(err)
