"""The editor main loop: render, read one key, apply it, repeat."""

from __future__ import annotations

import logging
from typing import Protocol

from kilo import persistence
from kilo.config import EditorConfig
from kilo.document import Document
from kilo.keys import InputDecoder, Key, KeyEvent, ctrl_key
from kilo.render import refresh_screen
from kilo.state import EditorState
from kilo.viewport import move_cursor, move_end, move_home, page_move

logger = logging.getLogger(__name__)

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"

# Reserved for the status bar and the message bar.
_BAR_LINES = 2

_ARROWS = (Key.up, Key.down, Key.left, Key.right)
# Editing keys without behaviour yet.
_NOOP_KEYS = (Key.backspace, Key.delete)
_NOOP_CHARS = ("\r", "\x1b", chr(ctrl_key("h")), chr(ctrl_key("l")))


class Terminal(Protocol):
    """What the editor needs from a terminal."""

    def read_byte(self) -> bytes: ...

    def write(self, data: str) -> None: ...

    def window_size(self) -> tuple[int, int]: ...

    def clear_screen(self) -> None: ...


class Editor:
    """One editing session bound to a terminal."""

    def __init__(self, terminal: Terminal, config: EditorConfig | None = None) -> None:
        self.terminal = terminal
        self.config = config or EditorConfig()
        self.decoder = InputDecoder(terminal.read_byte)

        rows, cols = terminal.window_size()
        self.state = EditorState(
            document=Document(self.config.tab_stop),
            screen_rows=max(rows - _BAR_LINES, 0),
            screen_cols=cols,
        )

    def open(self, path: str) -> None:
        self.state.filename = path
        persistence.load(self.state.document, path)
        self.state.dirty = 0

    def set_status_message(self, fmt: str, *args: object) -> None:
        self.state.set_status_message(fmt, *args)

    def save(self) -> None:
        if not self.state.filename:
            return
        try:
            written = persistence.save(self.state.document, self.state.filename)
        except OSError as e:
            logger.error("saving %s failed: %s", self.state.filename, e)
            self.set_status_message("Can't save! I/O error: %s", e.strerror or e)
            return
        self.state.dirty = 0
        self.set_status_message("%d bytes written to disk", written)

    def refresh_screen(self, now: float | None = None) -> None:
        refresh_screen(self.state, self.terminal, now, self.config.message_timeout)

    def process_keypress(self) -> bool:
        """Apply one key.  Returns ``False`` when the user asked to quit."""
        event = self.decoder.read_key()
        return self.handle_key(event)

    def handle_key(self, event: KeyEvent) -> bool:
        if event.is_ctrl("q"):
            self.terminal.clear_screen()
            return False
        if event.name in _NOOP_KEYS or event.char in _NOOP_CHARS:
            return True

        if event.is_ctrl("s"):
            self.save()
        elif event.name in _ARROWS:
            move_cursor(self.state, event.name)
        elif event.name in (Key.page_up, Key.page_down):
            page_move(self.state, event.name)
        elif event.name == Key.home:
            move_home(self.state)
        elif event.name == Key.end:
            move_end(self.state)
        elif event.char is not None:
            self.state.insert_char_at_cursor(event.char)
        return True

    def run(self) -> None:
        self.set_status_message(HELP_MESSAGE)
        while True:
            self.refresh_screen()
            if not self.process_keypress():
                break
