"""Shared test fixtures for walkgen tests."""

import io
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from walkgen.core import (
    CommandHistory,
    SnippetStash,
    WalkthroughSession,
    build_walkthrough,
    compile_text,
)
from walkgen.models import Walkthrough
from walkgen.services import ProcessOutcome


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


SAMPLE_SPEC = """---
step: Install packages
desc: |
  Install the base packages.
suggestions:
  - kind: cmd
    note: Refresh the index
    cmd: apt-get update
  - kind: snippet
    content: |
      key = value
---
step: Verify
desc: Check the service is running
---
"""


@pytest.fixture
def sample_spec() -> str:
    """Return a two-step spec with one cmd and one snippet suggestion."""
    return SAMPLE_SPEC


@pytest.fixture
def sample_spec_file(tmp_path: Path, sample_spec: str) -> Path:
    """Write the sample spec to disk."""
    path = tmp_path / "setup.walk"
    path.write_text(sample_spec)
    return path


@pytest.fixture
def sample_walkthrough(sample_spec: str) -> Walkthrough:
    """Compile and serialize the sample spec."""
    return build_walkthrough(compile_text(sample_spec), name="setup")


class FakeRunner:
    """ProcessRunner double that records calls and applies canned edits.

    ``edit_hook`` receives the path being edited and may rewrite it, the way
    a user would in a real editor.
    """

    def __init__(
        self,
        exit_code: int = 0,
        edit_hook: Callable[[Path], None] | None = None,
    ) -> None:
        self.exit_code = exit_code
        self.edit_hook = edit_hook
        self.edited: list[tuple[Path, str]] = []
        self.scripts: list[str] = []
        self.commands: list[str] = []

    def edit(self, path: Path) -> ProcessOutcome:
        self.edited.append((path, path.read_text() if path.exists() else ""))
        if self.edit_hook is not None:
            self.edit_hook(path)
        return ProcessOutcome(0)

    def run_script(self, script: str) -> ProcessOutcome:
        self.scripts.append(script)
        return ProcessOutcome(self.exit_code)

    def run_command(self, command: str) -> ProcessOutcome:
        self.commands.append(command)
        return ProcessOutcome(self.exit_code)


class ScriptedInput:
    """Replays canned answers to prompts; raises EOFError when exhausted.

    An exception class in the answer list is raised instead of returned.
    """

    def __init__(self, answers: list) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        answer = self.answers.pop(0)
        if isinstance(answer, type) and issubclass(answer, BaseException):
            raise answer
        return answer


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Create a process runner double that succeeds."""
    return FakeRunner()


@pytest.fixture
def make_session(tmp_path: Path) -> Callable[..., tuple[WalkthroughSession, io.StringIO]]:
    """Factory building a session wired to scripted input and a captured console.

    Returns (session, output buffer).
    """

    def factory(
        walkthrough: Walkthrough,
        answers: list,
        runner: FakeRunner | None = None,
        page_size: int | None = None,
        history: CommandHistory | None = None,
    ) -> tuple[WalkthroughSession, io.StringIO]:
        output = io.StringIO()
        console = Console(file=output, force_terminal=False, width=120)
        session = WalkthroughSession(
            walkthrough,
            runner or FakeRunner(),
            SnippetStash(tmp_path / "state" / "walk.py.snippet"),
            history=history,
            console=console,
            read_line=ScriptedInput(answers),
            scratch_dir=tmp_path / "scratch",
            page_size=page_size,
            rows=lambda: 24,
        )
        return session, output

    return factory
