"""Full-frame renderer.

Every refresh builds the whole screen (text rows, status bar, message bar,
cursor placement) into one :class:`FrameBuffer` and hands it to the
terminal in a single write.  There is no differential redraw.
"""

from __future__ import annotations

import time
from typing import Protocol

from kilo import __version__
from kilo.state import EditorState
from kilo.terminal import (
    CLEAR_LINE,
    CURSOR_HOME,
    CURSOR_POSITION_FMT,
    HIDE_CURSOR,
    RESET_ATTRIBUTES,
    REVERSE_VIDEO,
    SHOW_CURSOR,
)
from kilo.utils import truncate_to_width, visible_width
from kilo.viewport import scroll

WELCOME_FMT = "Kilo editor -- version {}"
NO_NAME = "[No Name]"
MESSAGE_TIMEOUT = 5.0


class Output(Protocol):
    def write(self, data: str) -> None: ...


class FrameBuffer:
    """Append-only buffer for one frame of terminal output."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, data: str) -> None:
        # A frame that cannot grow is drawn without the piece.
        try:
            self._parts.append(data)
        except MemoryError:
            pass

    def getvalue(self) -> str:
        return "".join(self._parts)


# ---------------------------------------------------------------------------
# Frame sections
# ---------------------------------------------------------------------------


def draw_rows(state: EditorState, fb: FrameBuffer) -> None:
    for y in range(state.screen_rows):
        file_row = y + state.row_offset
        if file_row >= state.num_rows:
            if state.num_rows == 0 and y == state.screen_rows // 3:
                _draw_welcome(state, fb)
            else:
                fb.append("~")
        else:
            render = state.document[file_row].render
            start = min(state.col_offset, len(render))
            fb.append(render[start : start + state.screen_cols])

        fb.append(CLEAR_LINE)
        fb.append("\r\n")


def _draw_welcome(state: EditorState, fb: FrameBuffer) -> None:
    welcome = WELCOME_FMT.format(__version__)[: state.screen_cols]
    padding = (state.screen_cols - len(welcome)) // 2
    if padding:
        fb.append("~")
        padding -= 1
    fb.append(" " * padding)
    fb.append(welcome)


def draw_status_bar(state: EditorState, fb: FrameBuffer) -> None:
    fb.append(REVERSE_VIDEO)

    name = (state.filename or NO_NAME)[:20]
    modified = " (modified)" if state.dirty else ""
    status = f"{name} - {state.num_rows} lines{modified}"
    right = f"{state.cy + 1}/{state.num_rows}"

    status = truncate_to_width(status, state.screen_cols)
    fb.append(status)
    width = visible_width(status)
    while width < state.screen_cols:
        if state.screen_cols - width == len(right):
            fb.append(right)
            break
        fb.append(" ")
        width += 1

    fb.append(RESET_ATTRIBUTES)
    fb.append("\r\n")


def draw_message_bar(
    state: EditorState,
    fb: FrameBuffer,
    now: float,
    timeout: float = MESSAGE_TIMEOUT,
) -> None:
    fb.append(CLEAR_LINE)
    if state.status_msg and now - state.status_msg_time < timeout:
        fb.append(truncate_to_width(state.status_msg, state.screen_cols))


# ---------------------------------------------------------------------------
# Whole frame
# ---------------------------------------------------------------------------


def build_frame(
    state: EditorState,
    now: float | None = None,
    message_timeout: float = MESSAGE_TIMEOUT,
) -> str:
    """Scroll to the cursor and return the complete frame as one string."""
    if now is None:
        now = time.monotonic()

    scroll(state)

    fb = FrameBuffer()
    fb.append(HIDE_CURSOR)
    fb.append(CURSOR_HOME)

    draw_rows(state, fb)
    draw_status_bar(state, fb)
    draw_message_bar(state, fb, now, message_timeout)

    fb.append(
        CURSOR_POSITION_FMT.format(
            state.cy - state.row_offset + 1,
            state.rx - state.col_offset + 1,
        )
    )
    fb.append(SHOW_CURSOR)
    return fb.getvalue()


def refresh_screen(
    state: EditorState,
    out: Output,
    now: float | None = None,
    message_timeout: float = MESSAGE_TIMEOUT,
) -> None:
    out.write(build_frame(state, now, message_timeout))
