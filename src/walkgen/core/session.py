"""Interactive walkthrough interpreter.

Drives one session over a ``Walkthrough``: enter a step, prompt for
commands, dispatch through the navigation state machine, and perform the
resulting renders, picks, snippet operations, and shell commands.
"""

import logging
import shlex
import tempfile
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule

from ..constants import CHROME_ROWS, MIN_PAGE_SIZE
from ..models import StepStatus, SuggestionKind, Walkthrough
from ..services.process import ProcessOutcome, ProcessRunner
from ..services.terminal import terminal_rows
from .history import CommandHistory
from .navigation import (
    Action,
    SessionState,
    Transition,
    UserCommandError,
    apply_command,
    compute_page_size,
    normalize_input,
    page_view,
)
from .scratch import (
    extract_snippet,
    render_command_buffer,
    render_snippet_buffer,
    scratch_file,
    strip_comment_lines,
)
from .snippets import PasteMode, SnippetStash

logger = logging.getLogger(__name__)

HELPERS = """Helpers:
  • home / h / ?                      → Reprint header + suggestions (resets to page 1)
  • pick N / N                        → Edit & run/handle item N (absolute numbering)
  • show_suggestions (ss, show)       → Reprint just the list
  • next_page (np), prev_page (pp)    → Page through suggestions; 'more' = next_page
  • page N                            → Jump to page N
  • flow (f)                          → Show full flow
  • next_step (ns, next)              → Mark current step done & continue
  • goto_step N (goto N, g N)         → Jump to step N
  • finish                            → Check remaining steps & finish if OK
  • quit (q, :q, :quit)               → Exit walkthrough
  • exit (x)                          → Leave this step's prompt

  • snippet @ prompt:
      :snippet show
      :snippet edit                   # edit the stash (no truncation)
      :snippet open <file>            # optional insert, then open file
      :snippet paste <file> [append|overwrite]"""

HINT_BAR = "[h] home  [?] help  [np/pp] page  [N] pick"
SNIPPET_USAGE = "usage: :snippet show | edit | open <file> | paste <file> [append|overwrite]"
PASTE_USAGE = "usage: :snippet paste <file> [append|overwrite]"
COMMAND_RULE = "─" * 51


class SessionExit(Exception):
    """Raised to end the session with an exit code."""

    def __init__(self, code: int = 0) -> None:
        super().__init__(code)
        self.code = code


class WalkthroughSession:
    """Synchronous read-dispatch-render loop over one walkthrough."""

    def __init__(
        self,
        walkthrough: Walkthrough,
        runner: ProcessRunner,
        stash: SnippetStash,
        *,
        history: CommandHistory | None = None,
        console: Console | None = None,
        read_line: Callable[[str], str] | None = None,
        scratch_dir: Path | None = None,
        page_size: int | None = None,
        rows: Callable[[], int] = terminal_rows,
        chrome_rows: int = CHROME_ROWS,
        min_page_size: int = MIN_PAGE_SIZE,
    ) -> None:
        self.walkthrough = walkthrough
        self.runner = runner
        self.stash = stash
        self.history = history
        self.console = console or Console()
        self.read_line = read_line or input
        self.scratch_dir = scratch_dir or Path(tempfile.gettempdir())
        self.page_size_override = page_size
        self.rows = rows
        self.chrome_rows = chrome_rows
        self.min_page_size = min_page_size
        self.state = SessionState.from_walkthrough(walkthrough)

    @property
    def page_size(self) -> int:
        return compute_page_size(
            self.rows(), self.page_size_override, self.chrome_rows, self.min_page_size
        )

    # -- main loop ---------------------------------------------------------

    def run(self) -> int:
        """Run the session until it finishes or the user quits.

        Returns:
            Process exit code (0 on finish/quit, 1 if there are no steps)
        """
        if not self.walkthrough.steps:
            self.console.print("No steps defined.")
            return 1
        try:
            while True:
                self._enter_step()
                self._prompt_loop()
        except SessionExit as end:
            return end.code

    def _enter_step(self) -> None:
        self.state.current_page = 1
        self.render_header()
        self.render_flow()
        self._read("Press Enter to continue...")
        self.render_header()
        self.render_suggestions()

    def _prompt_loop(self) -> None:
        """Prompt until a transition leaves the current step."""
        while True:
            self._say(HINT_BAR)
            raw = self._read(f"[STEP {self.state.current_step}] > ")
            if self.history is not None:
                self.history.append(raw)
            command = normalize_input(raw)
            logger.debug(f"input {raw!r} -> {command}")
            try:
                transition = apply_command(self.state, command, self.walkthrough, self.page_size)
                if self._perform(transition):
                    return
            except UserCommandError as e:
                self.console.print(f"[red]Error: {escape(str(e))}[/red]")

    def _perform(self, transition: Transition) -> bool:
        """Carry out a transition; True means leave the prompt loop."""
        action = transition.action
        if action is Action.RENDER_HOME:
            self.render_header()
            self.render_suggestions()
        elif action is Action.RENDER_SUGGESTIONS:
            self.render_suggestions()
        elif action is Action.RENDER_FLOW:
            self.render_flow()
        elif action is Action.PICK:
            assert transition.pick is not None
            self.pick(transition.pick)
        elif action is Action.ENTER_STEP:
            return True
        elif action is Action.FINISH:
            return self.finish()
        elif action is Action.QUIT:
            self._say("Exiting walkthrough...")
            raise SessionExit(0)
        elif action is Action.LEAVE:
            self._say("Leaving the prompt for this step...")
            return True
        elif action is Action.SNIPPET:
            self.snippet_command(transition.argument)
        elif action is Action.RUN_COMMAND:
            self._run_framed(transition.argument, self.runner.run_command)
        return False

    def _read(self, prompt: str) -> str:
        try:
            return self.read_line(prompt)
        except KeyboardInterrupt:
            self.console.print()
            return ""
        except EOFError:
            self.console.print()
            self._say("Exiting walkthrough...")
            raise SessionExit(0) from None

    def _say(self, text: str = "", end: str = "\n") -> None:
        """Print text verbatim: no markup, emoji codes, highlighting or wrapping."""
        self.console.print(
            text, end=end, markup=False, emoji=False, highlight=False, soft_wrap=True
        )

    # -- rendering ---------------------------------------------------------

    def render_header(self) -> None:
        step = self.walkthrough.step(self.state.current_step)
        self.console.clear()
        self.console.print(Rule(characters="━"))
        self._say(f" Welcome to Step {step.index} - {step.title}")
        self.console.print(Rule(characters="━"))
        self._say()
        if step.description:
            self._say(step.description, end="")
            self._say()

    def render_flow(self) -> None:
        self._say()
        self._say("Project Walkthrough Steps:")
        for step in self.walkthrough.steps:
            marker = "•"
            if self.state.status(step.index) is StepStatus.DONE:
                marker = "✓"
            if step.index == self.state.current_step:
                marker = "→"
            self._say(f" {marker} [Step {step.index}] {step.title}")
        self._say()

    def render_suggestions(self) -> None:
        self._say("Suggested items for this step:")
        self._say("-------------------------------")
        suggestions = self.walkthrough.suggestions_for(self.state.current_step)
        if not suggestions:
            self._say("  (none defined)")
            self._say()
            self._say(HELPERS)
            self._say()
            return

        view = page_view(suggestions, self.state.current_page, self.page_size)
        self.state.current_page = view.page
        for number, suggestion in view.items:
            kind = suggestion.kind.value
            if suggestion.path:
                self._say(f">>> [{number}] ({kind} → {suggestion.path})")
            else:
                self._say(f">>> [{number}] ({kind})")
            for line in suggestion.note.splitlines():
                self._say(f"  # {line}")
            if suggestion.body:
                for line in suggestion.body.splitlines():
                    self._say(f"  {line}")
            else:
                self._say("  (open to view/edit)")
            self._say()
        self._say(
            f"Page {view.page}/{view.max_page}  -  "
            "use: next_page (np), prev_page (pp), page N, more"
        )
        self._say()
        self._say(HELPERS)
        self._say()

    def _status_lines(self, outcome: ProcessOutcome) -> None:
        self._say(f"exit code: {outcome.exit_code}")
        self._say(f"result: {outcome.result.value}")

    def _run_framed(self, text: str, execute: Callable[[str], ProcessOutcome]) -> None:
        """Echo the command between rules, run it, and report its exit status."""
        if not text.strip():
            self._say("Nothing to run.")
            return
        self._say()
        self._say("── command " + "─" * 40)
        self._say(text.rstrip("\n"))
        self._say(COMMAND_RULE)
        self._say()
        outcome = execute(text)
        self._say()
        self._status_lines(outcome)
        self._say(COMMAND_RULE)

    # -- suggestions -------------------------------------------------------

    def pick(self, number: int) -> None:
        """Edit then execute (cmd) or edit then stash (snippet) item ``number``."""
        step = self.walkthrough.step(self.state.current_step)
        suggestion = self.walkthrough.suggestions_for(step.index)[number - 1]

        if suggestion.kind is SuggestionKind.SNIPPET:
            buffer = render_snippet_buffer(step, suggestion)
            with scratch_file(self.scratch_dir, "walk_snip_", ".txt", buffer) as path:
                self._say()
                self._say("Opening editor...")
                outcome = self.runner.edit(path)
                edited = path.read_text(encoding="utf-8")
            logger.debug(f"editor exited with {outcome.exit_code}")
            snippet = extract_snippet(edited)
            if snippet is None:
                self.console.print(
                    "[yellow]Snippet markers were removed; stash left unchanged.[/yellow]"
                )
                return
            self.stash.replace(snippet)
            self._say()
            self._say(f"Snippet stashed to: {self.stash.path}")
            self._say(
                "Use: :snippet open <file>  (offers insert)  or  "
                ":snippet paste <file> [append|overwrite]"
            )
            return

        buffer = render_command_buffer(number, step, suggestion)
        with scratch_file(self.scratch_dir, "walk_pick_", ".sh", buffer) as path:
            self._say()
            self._say("Opening editor...")
            outcome = self.runner.edit(path)
            script = strip_comment_lines(path.read_text(encoding="utf-8"))
        logger.debug(f"editor exited with {outcome.exit_code}")
        self._run_framed(script, self.runner.run_script)

    # -- snippet stash -----------------------------------------------------

    def snippet_command(self, argument: str) -> None:
        """Dispatch ``:snippet <verb> [...]``.

        Raises:
            UserCommandError: For malformed usage or an empty stash on paste
        """
        try:
            words = shlex.split(argument)
        except ValueError as e:
            raise UserCommandError(f"cannot parse snippet command: {e}") from None
        if not words:
            raise UserCommandError(SNIPPET_USAGE)

        verb, args = words[0].lower(), words[1:]
        if verb == "show":
            if self.stash.is_empty():
                self._say("(snippet stash is empty)")
            else:
                self._say(self.stash.read(), end="")
        elif verb in ("edit", "sedit"):
            self.runner.edit(self.stash.touch())
        elif verb in ("open", "sopen"):
            if not args:
                raise UserCommandError("file required")
            self._snippet_open(Path(args[0]).expanduser())
        elif verb in ("paste", "insert"):
            if not args:
                raise UserCommandError(PASTE_USAGE)
            mode = PasteMode.parse(args[1] if len(args) > 1 else None)
            self._paste(Path(args[0]).expanduser(), mode)
        else:
            raise UserCommandError(SNIPPET_USAGE)

    def _paste(self, target: Path, mode: PasteMode) -> None:
        try:
            self.stash.paste(target, mode)
        except OSError as e:
            raise UserCommandError(f"cannot write {target}: {e}") from None
        if mode is PasteMode.OVERWRITE:
            self._say(f"Snippet written to {target} (overwrite)")
        else:
            self._say(f"Snippet appended to {target}")

    def _snippet_open(self, target: Path) -> None:
        if self.stash.is_empty():
            self._say("Snippet stash is empty; opening file.")
        else:
            answer = self._read(f"Insert snippet into {target}? [a]ppend / [o]verwrite / [s]kip: ")
            answer = answer.strip().lower()
            if answer in ("a", "append"):
                self._paste(target, PasteMode.APPEND)
            elif answer in ("o", "overwrite"):
                self._paste(target, PasteMode.OVERWRITE)
        self.runner.edit(target)

    # -- finishing ---------------------------------------------------------

    def finish(self) -> bool:
        """Complete the session, confirming first if steps are pending.

        Returns:
            True if the user jumped to another step, False if cancelled

        Raises:
            SessionExit: When the walkthrough completes
        """
        total = self.state.total_steps
        self.console.print(Rule(characters="━"))
        pending = self.state.pending_steps()
        if not pending:
            self._say("All steps marked done.")
            self._say("Walkthrough completed!")
            raise SessionExit(0)

        self._say("Some steps are still pending:")
        for index in pending:
            self._say(f"  • [Step {index}] {self.walkthrough.step(index).title}")
        answer = self._read("Finish anyway? [y/N] ").strip().lower()
        if answer in ("y", "yes"):
            self._say("Finishing despite pending steps.")
            self._say("Walkthrough completed!")
            raise SessionExit(0)

        while True:
            choice = self._read(
                f"Enter a step number to go to (1..{total}), or 'c' to cancel: "
            ).strip().lower()
            if choice == "c":
                self._say("Okay, not finishing.")
                return False
            if choice.isdecimal() and 1 <= int(choice) <= total:
                self.state.jump_to(int(choice))
                return True
            self._say(f"Pick 1..{total} or 'c'.")
