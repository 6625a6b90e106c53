"""Terminal handling: tty mode scope, size, and line-editing history."""

import contextlib
import logging
import shutil
import sys
import termios
from collections.abc import Iterable, Iterator
from typing import TextIO

from ..constants import DEFAULT_TERMINAL_ROWS

try:
    import readline
except ImportError:  # pragma: no cover - not built on every platform
    readline = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def terminal_rows() -> int:
    """Visible row count of the controlling terminal, 24 if unknown."""
    rows = shutil.get_terminal_size(fallback=(80, DEFAULT_TERMINAL_ROWS)).lines
    return rows if rows > 0 else DEFAULT_TERMINAL_ROWS


def is_interactive(stream: TextIO | None = None) -> bool:
    """Return True if ``stream`` (stdin by default) is a terminal."""
    stream = stream or sys.stdin
    try:
        return stream.isatty()
    except ValueError:
        return False


@contextlib.contextmanager
def terminal_mode(stream: TextIO | None = None) -> Iterator[None]:
    """Enable canonical line editing for the session, restoring on exit.

    The saved attributes are restored on every exit path, including
    exceptions and KeyboardInterrupt. A non-tty stream is left alone.
    """
    stream = stream or sys.stdin
    if not is_interactive(stream):
        yield
        return

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    try:
        attrs = termios.tcgetattr(fd)
        attrs[3] |= termios.ICANON | termios.ECHO | termios.ECHOE
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
    except termios.error as e:
        logger.debug(f"Could not adjust terminal mode: {e}")
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def load_line_history(entries: Iterable[str]) -> None:
    """Seed readline's in-memory history for up-arrow recall."""
    if readline is None:
        return
    for entry in entries:
        readline.add_history(entry)
