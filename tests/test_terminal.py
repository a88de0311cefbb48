"""Tests for kilo.terminal -- raw mode attributes and terminal I/O.

termios calls are replaced with fakes so the tests run without a tty;
reads and writes go through real pipes.
"""

from __future__ import annotations

import errno
import os
import termios

import pytest

from kilo.terminal import RawTerminal, TerminalError, make_raw_attributes


def cooked_attributes() -> list:
    cc = [b"\x00"] * termios.NCCS
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    return [
        termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON,
        termios.OPOST,
        0,
        termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG,
        termios.B38400,
        termios.B38400,
        cc,
    ]


class FakeTermios:
    """Records tcsetattr calls and serves a fixed tcgetattr result."""

    def __init__(self, attrs: list | None = None) -> None:
        self.attrs = attrs if attrs is not None else cooked_attributes()
        self.set_calls: list[tuple[int, int, list]] = []
        self.fail_get = False
        self.fail_set = False

    def tcgetattr(self, fd: int) -> list:
        if self.fail_get:
            raise termios.error(25, "Inappropriate ioctl for device")
        return list(self.attrs)

    def tcsetattr(self, fd: int, when: int, attrs: list) -> None:
        if self.fail_set:
            raise termios.error(5, "Input/output error")
        self.set_calls.append((fd, when, attrs))


@pytest.fixture
def fake_termios(monkeypatch) -> FakeTermios:
    fake = FakeTermios()
    monkeypatch.setattr(termios, "tcgetattr", fake.tcgetattr)
    monkeypatch.setattr(termios, "tcsetattr", fake.tcsetattr)
    return fake


@pytest.fixture
def pipes():
    in_r, in_w = os.pipe()
    out_r, out_w = os.pipe()
    yield in_r, in_w, out_r, out_w
    for fd in (in_r, in_w, out_r, out_w):
        try:
            os.close(fd)
        except OSError:
            pass


# ---------------------------------------------------------------------------
# make_raw_attributes
# ---------------------------------------------------------------------------


class TestMakeRawAttributes:
    def test_flags_cleared(self) -> None:
        raw = make_raw_attributes(cooked_attributes())
        iflag, oflag, cflag, lflag = raw[0], raw[1], raw[2], raw[3]
        for bit in (termios.BRKINT, termios.ICRNL, termios.INPCK,
                    termios.ISTRIP, termios.IXON):
            assert not iflag & bit
        assert not oflag & termios.OPOST
        for bit in (termios.ECHO, termios.ICANON, termios.IEXTEN, termios.ISIG):
            assert not lflag & bit
        assert cflag & termios.CS8 == termios.CS8

    def test_read_timeout(self) -> None:
        raw = make_raw_attributes(cooked_attributes(), read_timeout_ds=3)
        assert raw[6][termios.VMIN] == 0
        assert raw[6][termios.VTIME] == 3

    def test_original_untouched(self) -> None:
        original = cooked_attributes()
        make_raw_attributes(original)
        assert original[6][termios.VMIN] == 1
        assert original[3] & termios.ECHO


# ---------------------------------------------------------------------------
# enter / restore
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_enter_applies_raw_attributes(self, fake_termios: FakeTermios) -> None:
        term = RawTerminal(5, 6)
        term.enter()
        try:
            fd, when, attrs = fake_termios.set_calls[0]
            assert fd == 5
            assert when == termios.TCSAFLUSH
            assert not attrs[3] & termios.ECHO
            assert term.active
        finally:
            term.restore()

    def test_restore_reapplies_original(self, fake_termios: FakeTermios) -> None:
        term = RawTerminal(5, 6)
        term.enter()
        term.restore()
        assert fake_termios.set_calls[-1][2] == fake_termios.attrs
        assert not term.active

    def test_restore_is_idempotent(self, fake_termios: FakeTermios) -> None:
        term = RawTerminal(5, 6)
        term.enter()
        term.restore()
        term.restore()
        assert len(fake_termios.set_calls) == 2

    def test_context_manager_restores_on_error(self, fake_termios: FakeTermios) -> None:
        with pytest.raises(RuntimeError):
            with RawTerminal(5, 6):
                raise RuntimeError("boom")
        assert fake_termios.set_calls[-1][2] == fake_termios.attrs

    def test_get_failure_is_terminal_error(self, fake_termios: FakeTermios) -> None:
        fake_termios.fail_get = True
        with pytest.raises(TerminalError, match="tcgetattr"):
            RawTerminal(5, 6).enter()

    def test_set_failure_is_terminal_error(self, fake_termios: FakeTermios) -> None:
        fake_termios.fail_set = True
        term = RawTerminal(5, 6)
        with pytest.raises(TerminalError, match="tcsetattr"):
            term.enter()
        fake_termios.fail_set = False
        term.restore()
        assert not term.active

    def test_real_non_tty_fails(self, pipes) -> None:
        in_r, _, _, out_w = pipes
        with pytest.raises(TerminalError):
            RawTerminal(in_r, out_w).enter()


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------


class TestIO:
    def test_read_byte(self, pipes) -> None:
        in_r, in_w, _, out_w = pipes
        os.write(in_w, b"ab")
        term = RawTerminal(in_r, out_w)
        assert term.read_byte() == b"a"
        assert term.read_byte() == b"b"

    def test_eagain_is_timeout(self, monkeypatch) -> None:
        def fake_read(fd, n):
            raise OSError(errno.EAGAIN, "Resource temporarily unavailable")

        monkeypatch.setattr(os, "read", fake_read)
        assert RawTerminal(0, 1).read_byte() == b""

    def test_other_read_error_is_fatal(self, monkeypatch) -> None:
        def fake_read(fd, n):
            raise OSError(errno.EIO, "Input/output error")

        monkeypatch.setattr(os, "read", fake_read)
        with pytest.raises(TerminalError, match="read"):
            RawTerminal(0, 1).read_byte()

    def test_write(self, pipes) -> None:
        in_r, _, out_r, out_w = pipes
        RawTerminal(in_r, out_w).write("\x1b[2Jé")
        assert os.read(out_r, 100) == "\x1b[2Jé".encode()

    def test_write_surrogates_as_raw_bytes(self, pipes) -> None:
        in_r, _, out_r, out_w = pipes
        RawTerminal(in_r, out_w).write("caf\udce9")
        assert os.read(out_r, 100) == b"caf\xe9"

    def test_clear_screen(self, pipes) -> None:
        in_r, _, out_r, out_w = pipes
        RawTerminal(in_r, out_w).clear_screen()
        assert os.read(out_r, 100) == b"\x1b[2J\x1b[H"


class TestWindowSize:
    def test_from_ioctl(self, monkeypatch) -> None:
        monkeypatch.setattr(os, "get_terminal_size", lambda fd: os.terminal_size((100, 30)))
        assert RawTerminal(0, 1).window_size() == (30, 100)

    def test_fallback_to_cursor_report(self, monkeypatch, pipes) -> None:
        in_r, in_w, out_r, out_w = pipes

        def no_size(fd):
            raise OSError(errno.ENOTTY, "Inappropriate ioctl for device")

        monkeypatch.setattr(os, "get_terminal_size", no_size)
        os.write(in_w, b"\x1b[42;117R")
        assert RawTerminal(in_r, out_w).window_size() == (42, 117)
        assert os.read(out_r, 100) == b"\x1b[999C\x1b[999B\x1b[6n"

    def test_zero_columns_uses_fallback(self, monkeypatch, pipes) -> None:
        in_r, in_w, _, out_w = pipes
        monkeypatch.setattr(os, "get_terminal_size", lambda fd: os.terminal_size((0, 0)))
        os.write(in_w, b"\x1b[10;20R")
        assert RawTerminal(in_r, out_w).window_size() == (10, 20)

    def test_bad_report_is_fatal(self, monkeypatch, pipes) -> None:
        in_r, in_w, _, out_w = pipes

        def no_size(fd):
            raise OSError(errno.ENOTTY, "Inappropriate ioctl for device")

        monkeypatch.setattr(os, "get_terminal_size", no_size)
        os.write(in_w, b"garbage")
        os.close(in_w)
        with pytest.raises(TerminalError, match="get_window_size"):
            RawTerminal(in_r, out_w).window_size()
