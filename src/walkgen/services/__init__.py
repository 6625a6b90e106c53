"""External process and terminal integrations for walkgen.

- process: editor and subordinate shell execution, exit classification
- terminal: tty mode scope, terminal size, readline history
"""

from .process import (
    ExitClass,
    ProcessOutcome,
    ProcessRunner,
    SubprocessRunner,
    choose_editor,
    classify_exit,
    normalize_returncode,
)
from .terminal import is_interactive, load_line_history, terminal_mode, terminal_rows

__all__ = [
    "ExitClass",
    "ProcessOutcome",
    "ProcessRunner",
    "SubprocessRunner",
    "choose_editor",
    "classify_exit",
    "is_interactive",
    "load_line_history",
    "normalize_returncode",
    "terminal_mode",
    "terminal_rows",
]
