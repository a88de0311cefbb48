"""Line-oriented document model.

A :class:`Document` is an ordered list of :class:`Row` objects.  Each row
keeps its raw characters and a rendered form with tabs expanded to the next
tab stop; the rendered form is rebuilt whenever the raw text changes.
"""

from __future__ import annotations

TAB_STOP = 8


class Row:
    """One line of text: raw ``chars`` and tab-expanded ``render``."""

    __slots__ = ("chars", "render", "tab_stop")

    def __init__(self, chars: str = "", tab_stop: int = TAB_STOP) -> None:
        self.chars = chars
        self.render = ""
        self.tab_stop = tab_stop
        self.update()

    def __repr__(self) -> str:
        return f"Row({self.chars!r})"

    @property
    def size(self) -> int:
        return len(self.chars)

    @property
    def rsize(self) -> int:
        return len(self.render)

    def update(self) -> None:
        """Rebuild ``render`` from ``chars``."""
        out: list[str] = []
        col = 0
        for ch in self.chars:
            if ch == "\t":
                out.append(" ")
                col += 1
                while col % self.tab_stop != 0:
                    out.append(" ")
                    col += 1
            else:
                out.append(ch)
                col += 1
        self.render = "".join(out)

    def insert_char(self, at: int, ch: str) -> None:
        """Insert *ch* before raw column *at*; out-of-range *at* appends."""
        if at < 0 or at > self.size:
            at = self.size
        self.chars = self.chars[:at] + ch + self.chars[at:]
        self.update()


def row_cx_to_rx(row: Row, cx: int) -> int:
    """Map raw column *cx* of *row* to its rendered column."""
    rx = 0
    for ch in row.chars[:cx]:
        if ch == "\t":
            rx += (row.tab_stop - 1) - (rx % row.tab_stop)
        rx += 1
    return rx


class Document:
    """Ordered rows of a text buffer.  Rows are only ever appended."""

    def __init__(self, tab_stop: int = TAB_STOP) -> None:
        self.rows: list[Row] = []
        self.tab_stop = tab_stop

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    def __iter__(self):
        return iter(self.rows)

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def row_at(self, index: int) -> Row | None:
        """Return the row at *index*, or ``None`` past the last line."""
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    def append_row(self, content: str) -> Row:
        row = Row(content, self.tab_stop)
        self.rows.append(row)
        return row

    def insert_char(self, row_index: int, col: int, ch: str) -> None:
        self.rows[row_index].insert_char(col, ch)
