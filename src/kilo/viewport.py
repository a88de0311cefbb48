"""Cursor movement and scroll-offset computation."""

from __future__ import annotations

from kilo.document import row_cx_to_rx
from kilo.keys import Key
from kilo.state import EditorState


def move_cursor(state: EditorState, key: str) -> None:
    """Move the cursor one step in the direction of arrow *key*.

    The column is clamped to the length of the row the cursor ends up on;
    no preferred column is remembered across shorter rows.
    """
    row = state.current_row()

    if key == Key.left:
        if state.cx > 0:
            state.cx -= 1
        elif state.cy > 0:
            state.cy -= 1
            state.cx = state.document[state.cy].size
    elif key == Key.right:
        if row is not None and state.cx < row.size:
            state.cx += 1
        elif row is not None and state.cx == row.size:
            state.cy += 1
            state.cx = 0
    elif key == Key.up:
        if state.cy > 0:
            state.cy -= 1
    elif key == Key.down:
        if state.cy < state.num_rows:
            state.cy += 1

    row = state.current_row()
    row_len = row.size if row is not None else 0
    if state.cx > row_len:
        state.cx = row_len


def page_move(state: EditorState, key: str) -> None:
    """Jump a screenful up or down as a run of single-line moves."""
    if key == Key.page_up:
        state.cy = state.row_offset
        direction = Key.up
    else:
        bottom = state.row_offset + state.screen_rows - 1
        state.cy = max(min(bottom, state.num_rows), 0)
        direction = Key.down

    for _ in range(state.screen_rows):
        move_cursor(state, direction)

    # The snap above can land on a shorter row without a move to clamp it.
    row = state.current_row()
    row_len = row.size if row is not None else 0
    if state.cx > row_len:
        state.cx = row_len


def move_home(state: EditorState) -> None:
    state.cx = 0


def move_end(state: EditorState) -> None:
    row = state.current_row()
    if row is not None:
        state.cx = row.size


def scroll(state: EditorState) -> None:
    """Recompute ``rx`` and shift the offsets just enough to show the cursor."""
    row = state.current_row()
    state.rx = row_cx_to_rx(row, state.cx) if row is not None else 0

    if state.cy < state.row_offset:
        state.row_offset = state.cy
    if state.cy >= state.row_offset + state.screen_rows:
        state.row_offset = state.cy - state.screen_rows + 1
    if state.rx < state.col_offset:
        state.col_offset = state.rx
    if state.rx >= state.col_offset + state.screen_cols:
        state.col_offset = state.rx - state.screen_cols + 1
