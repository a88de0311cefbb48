"""Loading documents from and saving them to plain text files.

Files are read and written as UTF-8 with ``surrogateescape`` so that bytes
which are not valid UTF-8 survive a load/save cycle unchanged.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile

from kilo.document import Document

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
ERRORS = "surrogateescape"


def load(document: Document, path: str) -> None:
    """Append every line of *path* to *document*.

    Trailing ``\\n`` and ``\\r`` characters are stripped from each line.
    An ``OSError`` from opening the file propagates to the caller.
    """
    count = 0
    with open(path, "rb") as f:
        for line in f:
            text = line.rstrip(b"\r\n").decode(ENCODING, errors=ERRORS)
            document.append_row(text)
            count += 1
    logger.info("loaded %d lines from %s", count, path)


def rows_to_string(document: Document) -> str:
    """Join all raw rows, each terminated by a newline."""
    return "".join(row.chars + "\n" for row in document)


def save(document: Document, path: str | None) -> int:
    """Write *document* to *path* and return the number of bytes written.

    Returns ``0`` without touching the file system when *path* is ``None``.
    The new content is written to a temporary file beside the file *path*
    resolves to and moved over it, so a failed save leaves the old file
    intact and a symlink keeps pointing at the saved file.
    """
    if not path:
        return 0

    data = rows_to_string(document).encode(ENCODING, errors=ERRORS)
    # Replace the file a symlink points at, not the link.
    target = os.path.realpath(path)
    directory = os.path.dirname(target)

    try:
        mode = stat.S_IMODE(os.stat(target).st_mode)
    except FileNotFoundError:
        mode = 0o644

    fd, tmp_path = tempfile.mkstemp(
        dir=directory, prefix=f".{os.path.basename(target)}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, target)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise

    logger.info("wrote %d bytes to %s", len(data), path)
    return len(data)
