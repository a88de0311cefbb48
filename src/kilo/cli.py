"""CLI entry point for kilo. Uses Click for argument parsing."""

from __future__ import annotations

import contextlib
import logging
import sys

import click

from kilo.config import EditorConfig
from kilo.editor import Editor
from kilo.terminal import CLEAR_SCREEN, CURSOR_HOME, RawTerminal, TerminalError

logger = logging.getLogger(__name__)


def configure_logging(path: str) -> None:
    """Send log records to *path*; stdout belongs to the editor screen."""
    if path:
        logging.basicConfig(
            filename=path,
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    else:
        logging.getLogger("kilo").addHandler(logging.NullHandler())


def die(terminal: RawTerminal, message: str) -> None:
    """Clear the screen, report *message* and exit with status 1."""
    terminal.write(CLEAR_SCREEN + CURSOR_HOME)
    with contextlib.suppress(TerminalError):
        terminal.restore()
    logger.error("fatal: %s", message)
    click.echo(f"kilo: {message}", err=True)
    sys.exit(1)


@click.command()
@click.argument("filename", required=False)
def main(filename):
    """A small terminal text editor."""
    config = EditorConfig.from_env()
    configure_logging(config.log_path)

    terminal = RawTerminal(read_timeout_ds=config.read_timeout_ds)
    try:
        with terminal:
            editor = Editor(terminal, config)
            if filename:
                editor.open(filename)
            editor.run()
    except TerminalError as e:
        die(terminal, str(e))
    except OSError as e:
        die(terminal, f"{e.filename or filename}: {e.strerror or e}")
    sys.exit(0)


if __name__ == "__main__":
    main()
