"""External editor and subordinate shell execution.

The session never runs child processes directly; it goes through a
``ProcessRunner`` so tests can substitute canned exit codes and edits.
"""

import contextlib
import logging
import shlex
import shutil
import signal
import subprocess
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from ..constants import COMMAND_NOT_FOUND, EDITOR_CANDIDATES, FALLBACK_EDITOR

logger = logging.getLogger(__name__)


class ExitClass(str, Enum):
    """Classification of a child exit status."""

    OK = "ok"
    INTERRUPTED = "interrupted"
    ERROR = "error"


@dataclass(frozen=True)
class ProcessOutcome:
    """Exit status of an editor or command child process."""

    exit_code: int

    @property
    def result(self) -> ExitClass:
        return classify_exit(self.exit_code)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def normalize_returncode(returncode: int) -> int:
    """Map a signal death (negative returncode) to the shell's 128+N form."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def classify_exit(exit_code: int) -> ExitClass:
    """0 is ok, 128 and above is interrupted, anything else is an error."""
    if exit_code == 0:
        return ExitClass.OK
    if exit_code >= 128:
        return ExitClass.INTERRUPTED
    return ExitClass.ERROR


def choose_editor(
    preferences: Sequence[str] = (),
    which: Callable[[str], str | None] = shutil.which,
) -> str:
    """Pick the first usable editor command.

    Explicit preferences (VISUAL, EDITOR, configured editor) are tried
    first, then the conventional candidates; ``vi`` is the final fallback.
    """
    for candidate in [*preferences, *EDITOR_CANDIDATES]:
        try:
            words = shlex.split(candidate)
        except ValueError:
            logger.debug(f"Skipping unparsable editor {candidate!r}")
            continue
        if words and which(words[0]):
            return candidate
    return FALLBACK_EDITOR


class ProcessRunner(Protocol):
    """Capability to spawn an interactive child and block until it exits."""

    def edit(self, path: Path) -> ProcessOutcome:
        """Open ``path`` in the editor."""
        ...

    def run_script(self, script: str) -> ProcessOutcome:
        """Run multi-line script text in the subordinate shell."""
        ...

    def run_command(self, command: str) -> ProcessOutcome:
        """Run an ad hoc command line in a login shell."""
        ...


@contextlib.contextmanager
def _ignore_interrupts() -> Iterator[None]:
    """Ignore SIGINT in this process while a foreground child runs."""
    original_handler = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, original_handler)


class SubprocessRunner:
    """ProcessRunner backed by real child processes sharing the terminal."""

    def __init__(self, editor: str, shell: str) -> None:
        self.editor = editor
        self.shell = shell

    def _wait(self, args: list[str]) -> ProcessOutcome:
        logger.debug(f"Spawning: {' '.join(args)}")
        try:
            proc = subprocess.Popen(args)
        except FileNotFoundError:
            logger.warning(f"Command not found: {args[0]}")
            return ProcessOutcome(COMMAND_NOT_FOUND)
        # The child keeps default SIGINT handling; only the parent ignores it.
        with _ignore_interrupts():
            returncode = proc.wait()
        return ProcessOutcome(normalize_returncode(returncode))

    def edit(self, path: Path) -> ProcessOutcome:
        return self._wait([*shlex.split(self.editor), str(path)])

    def run_script(self, script: str) -> ProcessOutcome:
        return self._wait([self.shell, "-c", script])

    def run_command(self, command: str) -> ProcessOutcome:
        return self._wait([self.shell, "-lc", command])
