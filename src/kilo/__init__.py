"""kilo: a small raw-mode terminal text editor."""

__version__ = "0.0.1"

# Configuration
from kilo.config import EditorConfig

# Document model
from kilo.document import TAB_STOP, Document, Row, row_cx_to_rx

# Editor loop
from kilo.editor import Editor

# Keyboard input decoding
from kilo.keys import InputDecoder, Key, KeyEvent, ctrl_key, decode

# Rendering
from kilo.render import FrameBuffer, build_frame, refresh_screen

# Editor state
from kilo.state import EditorState

# Terminal
from kilo.terminal import RawTerminal, TerminalError

__all__ = [
    "__version__",
    "Document",
    "Editor",
    "EditorConfig",
    "EditorState",
    "FrameBuffer",
    "InputDecoder",
    "Key",
    "KeyEvent",
    "RawTerminal",
    "Row",
    "TAB_STOP",
    "TerminalError",
    "build_frame",
    "ctrl_key",
    "decode",
    "refresh_screen",
    "row_cx_to_rx",
]
