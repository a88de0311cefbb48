"""Editor state shared by the viewport, renderer and key dispatcher."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from kilo.document import Document


@dataclass
class EditorState:
    """Document, cursor, viewport and status line of one editing session.

    ``screen_rows`` excludes the two lines reserved for the status and
    message bars.  ``cy == document.num_rows`` is the virtual empty line
    past the end of the document.
    """

    document: Document = field(default_factory=Document)
    cx: int = 0
    cy: int = 0
    rx: int = 0
    row_offset: int = 0
    col_offset: int = 0
    screen_rows: int = 0
    screen_cols: int = 0
    filename: str | None = None
    status_msg: str = ""
    status_msg_time: float = 0.0
    dirty: int = 0

    @property
    def num_rows(self) -> int:
        return self.document.num_rows

    def current_row(self):
        return self.document.row_at(self.cy)

    def set_status_message(self, fmt: str, *args: object) -> None:
        self.status_msg = fmt % args if args else fmt
        self.status_msg_time = time.monotonic()

    def insert_char_at_cursor(self, ch: str) -> None:
        """Insert *ch* at the cursor, opening a new row on the virtual line."""
        if self.cy == self.document.num_rows:
            self.document.append_row("")
        self.document.insert_char(self.cy, self.cx, ch)
        self.cx += 1
        self.dirty += 1
