"""Interactive wizard producing the same IR records as the compiler.

Uses plain ``input()`` prompts, with a terminal menu for the suggestion
kind. Requires an interactive terminal.
"""

from collections.abc import Callable

from rich.console import Console
from simple_term_menu import TerminalMenu

from ..models import (
    DescriptionRecord,
    EndOfStepRecord,
    Record,
    StepRecord,
    SuggestionKind,
    SuggestionRecord,
)

YES_ANSWERS = frozenset({"y", "yes", "yeah", "yup", "да", "д", "s", "si"})
DONE_ANSWERS = frozenset({"done", "n", "no", "нет"})
MULTILINE_TERMINATOR = "EOF"
KIND_CHOICES = [SuggestionKind.CMD, SuggestionKind.SNIPPET]


class WizardError(Exception):
    """Wizard cannot run or produced no steps."""


class Wizard:
    """Prompt/answer loop that builds a walkthrough step by step."""

    def __init__(
        self,
        console: Console | None = None,
        read_line: Callable[[str], str] | None = None,
    ) -> None:
        self.console = console or Console()
        self.read_line = read_line or input

    def _say(self, text: str = "") -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def ask_line(self, prompt: str) -> str:
        return self.read_line(prompt)

    def ask_required(self, prompt: str) -> str:
        while True:
            answer = self.ask_line(prompt).strip()
            if answer:
                return answer
            self._say("(please enter a value)")

    def ask_multiline(self, heading: str) -> str:
        """Collect lines until a single ``EOF`` line; each line keeps its newline."""
        self._say(heading)
        self._say(f"(finish with a single line: {MULTILINE_TERMINATOR})")
        lines: list[str] = []
        while True:
            try:
                line = self.read_line("")
            except EOFError:
                break
            if line == MULTILINE_TERMINATOR:
                break
            lines.append(line + "\n")
        return "".join(lines)

    def confirm(self, prompt: str) -> bool:
        while True:
            try:
                answer = self.ask_line(f"{prompt} [y/n]: ").strip().lower()
            except EOFError:
                return False
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no", ""):
                return False
            self._say("Please answer y or n.")

    def ask_continue(self, prompt: str) -> bool | None:
        """True to add another item, False when done, None to re-ask."""
        try:
            answer = self.ask_line(prompt).strip().lower()
        except EOFError:
            return False
        if answer in DONE_ANSWERS:
            return False
        if answer in YES_ANSWERS:
            return True
        return None

    def choose_kind(self) -> SuggestionKind:
        menu = TerminalMenu(
            [kind.value for kind in KIND_CHOICES],
            title="    Type (cmd/snippet):",
            cursor_index=0,
        )
        selection = menu.show()
        if not isinstance(selection, int):
            return SuggestionKind.CMD
        return KIND_CHOICES[selection]

    def _suggestion(self) -> SuggestionRecord | None:
        kind = self.choose_kind()
        note = self.ask_multiline("    Note (multiline; end with 'EOF'):")
        label = "Command" if kind is SuggestionKind.CMD else "Snippet content"
        body = self.ask_multiline(f"    {label} (multiline; end with 'EOF'):")

        self._say(f"    Preview kind: {kind.value}")
        if note:
            self._say(f"    Note:\n{note.rstrip()}")
        self._say(f"    {'Command' if kind is SuggestionKind.CMD else 'Content'}:\n{body.rstrip()}")
        if not self.confirm("    Save this suggestion?"):
            self._say("    Discarded.")
            return None
        return SuggestionRecord(kind=kind, note=note, body=body)

    def _step(self, number: int) -> list[Record] | None:
        self._say(f"Step {number}")
        self._say("-------")
        title = self.ask_required("  Title: ")
        description = self.ask_multiline("  Description (multiline; end with 'EOF'):")

        self._say(f"  Preview title: {title}")
        if description:
            self._say(f"  Preview desc:\n{description.rstrip()}")
        else:
            self._say("  (no description)")
        if not self.confirm("  Save this step?"):
            self._say("  Discarded. Start over.")
            return None

        records: list[Record] = [StepRecord(title=title)]
        while True:
            more = self.ask_continue("  Add a suggestion? (y / done): ")
            if more is None:
                continue
            if not more:
                break
            suggestion = self._suggestion()
            if suggestion is not None:
                records.append(suggestion)

        if description:
            records.append(DescriptionRecord(text=description))
        records.append(EndOfStepRecord())
        return records

    def run(self) -> list[Record]:
        """Run the wizard.

        Returns:
            IR records for every confirmed step

        Raises:
            WizardError: If no steps were confirmed
        """
        self._say("Interactive constructor")
        self._say("Add steps/suggestions; type 'done' to finish.")
        self._say()

        records: list[Record] = []
        steps = 0
        while True:
            more = self.ask_continue("Add a new step? (y / done): ")
            if more is None:
                continue
            if not more:
                break
            try:
                step_records = self._step(steps + 1)
            except EOFError:
                break
            if step_records is not None:
                records.extend(step_records)
                steps += 1
            self._say()

        if steps == 0:
            raise WizardError("No steps added.")
        return records


def run_wizard(
    console: Console | None = None,
    read_line: Callable[[str], str] | None = None,
) -> list[Record]:
    """Run the interactive wizard and return its IR records."""
    return Wizard(console=console, read_line=read_line).run()
