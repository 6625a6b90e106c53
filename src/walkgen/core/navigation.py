"""Navigation state machine for the walkthrough session.

Input lines are normalized into ``Command`` objects, then
``apply_command`` mutates the owned ``SessionState`` and returns a
``Transition`` telling the interpreter what to render or do next. Nothing
here performs I/O.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum

from ..constants import CHROME_ROWS, MIN_PAGE_SIZE
from ..models import StepStatus, Suggestion, Walkthrough


class UserCommandError(Exception):
    """Invalid user command; reported inline, the session continues."""


# Canonical command name for each accepted spelling
ALIASES: dict[str, str] = {
    "home": "home",
    "h": "home",
    "?": "home",
    "show_suggestions": "show_suggestions",
    "ss": "show_suggestions",
    "show": "show_suggestions",
    "flow": "flow",
    "f": "flow",
    "next_step": "next_step",
    "ns": "next_step",
    "next": "next_step",
    "next_page": "next_page",
    "np": "next_page",
    "more": "next_page",
    "prev_page": "prev_page",
    "pp": "prev_page",
    "finish": "finish",
    "quit": "quit",
    "q": "quit",
    ":q": "quit",
    ":quit": "quit",
    "exit": "exit",
    "x": "exit",
}

PICK_RE = re.compile(r"^(?:pick\s+)?(\d+)$", re.IGNORECASE)
GOTO_RE = re.compile(r"^(?:goto_step|goto|g)\s+(\d+)$", re.IGNORECASE)
PAGE_RE = re.compile(r"^page\s+(\d+)$", re.IGNORECASE)
SNIPPET_RE = re.compile(r"^:snippet(?:\s+(.*))?$", re.IGNORECASE)


@dataclass(frozen=True)
class Command:
    """A normalized prompt command."""

    name: str
    args: tuple[str, ...] = ()


def normalize_input(raw: str) -> Command:
    """Resolve aliases and argument forms into a canonical command.

    Non-empty input that matches nothing becomes a ``run`` command whose
    argument is the text to execute in the subordinate shell.
    """
    text = raw.strip()
    if not text:
        return Command("noop")

    canonical = ALIASES.get(text.lower())
    if canonical:
        return Command(canonical)

    if match := SNIPPET_RE.match(text):
        return Command("snippet", ((match.group(1) or "").strip(),))
    if match := PICK_RE.match(text):
        return Command("pick", (match.group(1),))
    if match := GOTO_RE.match(text):
        return Command("goto_step", (match.group(1),))
    if match := PAGE_RE.match(text):
        return Command("page", (match.group(1),))
    return Command("run", (text,))


@dataclass
class SessionState:
    """Transient per-run state owned by the interpreter."""

    total_steps: int
    current_step: int = 1
    current_page: int = 1
    statuses: list[StepStatus] = field(default_factory=list)

    @classmethod
    def from_walkthrough(cls, walkthrough: Walkthrough) -> "SessionState":
        return cls(
            total_steps=walkthrough.total_steps,
            statuses=[step.status for step in walkthrough.steps],
        )

    def status(self, index: int) -> StepStatus:
        return self.statuses[index - 1]

    def mark_done(self, index: int) -> None:
        self.statuses[index - 1] = StepStatus.DONE

    def pending_steps(self) -> list[int]:
        """1-based indexes of steps not yet done."""
        return [i for i, s in enumerate(self.statuses, start=1) if s is not StepStatus.DONE]

    def jump_to(self, index: int) -> None:
        """Move to step ``index`` and reset paging.

        Raises:
            UserCommandError: If the index is outside 1..total_steps
        """
        if not 1 <= index <= self.total_steps:
            raise UserCommandError(f"Step must be 1..{self.total_steps}")
        self.current_step = index
        self.current_page = 1


# -- pagination -------------------------------------------------------------


def compute_page_size(
    rows: int,
    override: int | None = None,
    chrome_rows: int = CHROME_ROWS,
    minimum: int = MIN_PAGE_SIZE,
) -> int:
    """Suggestions per page: explicit override, else rows minus chrome."""
    if override is not None and override >= 1:
        return override
    return max(rows - chrome_rows, minimum)


def max_page(length: int, page_size: int) -> int:
    """Number of pages for ``length`` items; at least one."""
    return max(1, math.ceil(length / page_size))


def clamp_page(page: int, length: int, page_size: int) -> int:
    return min(max(page, 1), max_page(length, page_size))


@dataclass(frozen=True)
class PageView:
    """Visible slice of a step's suggestions.

    ``items`` pairs each suggestion with its absolute number
    (offset within the step + 1), independent of the page size.
    """

    page: int
    max_page: int
    items: list[tuple[int, Suggestion]]


def page_view(suggestions: list[Suggestion], page: int, page_size: int) -> PageView:
    page = clamp_page(page, len(suggestions), page_size)
    offset = (page - 1) * page_size
    visible = suggestions[offset : offset + page_size]
    return PageView(
        page=page,
        max_page=max_page(len(suggestions), page_size),
        items=[(offset + i + 1, s) for i, s in enumerate(visible)],
    )


# -- transitions ------------------------------------------------------------


class Action(str, Enum):
    """What the interpreter must do after a command."""

    NONE = "none"
    RENDER_HOME = "render_home"
    RENDER_SUGGESTIONS = "render_suggestions"
    RENDER_FLOW = "render_flow"
    PICK = "pick"
    ENTER_STEP = "enter_step"
    FINISH = "finish"
    QUIT = "quit"
    LEAVE = "leave"
    SNIPPET = "snippet"
    RUN_COMMAND = "run_command"


@dataclass(frozen=True)
class Transition:
    action: Action
    pick: int | None = None
    argument: str = ""


def apply_command(
    state: SessionState,
    command: Command,
    walkthrough: Walkthrough,
    page_size: int,
) -> Transition:
    """Apply ``command`` to ``state``.

    Raises:
        UserCommandError: For an invalid pick number or step target
    """
    length = walkthrough.step(state.current_step).length
    name = command.name

    if name == "noop":
        return Transition(Action.NONE)
    if name == "home":
        state.current_page = 1
        return Transition(Action.RENDER_HOME)
    if name == "show_suggestions":
        return Transition(Action.RENDER_SUGGESTIONS)
    if name == "flow":
        return Transition(Action.RENDER_FLOW)
    if name == "pick":
        n = int(command.args[0])
        if length == 0:
            raise UserCommandError("No items for this step.")
        if not 1 <= n <= length:
            raise UserCommandError(f"Invalid pick number (1..{length}).")
        return Transition(Action.PICK, pick=n)
    if name == "next_step":
        state.mark_done(state.current_step)
        state.current_page = 1
        if state.current_step >= state.total_steps:
            return Transition(Action.FINISH)
        state.current_step += 1
        return Transition(Action.ENTER_STEP)
    if name == "goto_step":
        state.jump_to(int(command.args[0]))
        return Transition(Action.ENTER_STEP)
    if name == "next_page":
        state.current_page = clamp_page(state.current_page + 1, length, page_size)
        return Transition(Action.RENDER_SUGGESTIONS)
    if name == "prev_page":
        state.current_page = clamp_page(state.current_page - 1, length, page_size)
        return Transition(Action.RENDER_SUGGESTIONS)
    if name == "page":
        state.current_page = clamp_page(int(command.args[0]), length, page_size)
        return Transition(Action.RENDER_SUGGESTIONS)
    if name == "finish":
        state.mark_done(state.current_step)
        return Transition(Action.FINISH)
    if name == "quit":
        return Transition(Action.QUIT)
    if name == "exit":
        return Transition(Action.LEAVE)
    if name == "snippet":
        return Transition(Action.SNIPPET, argument=command.args[0])
    return Transition(Action.RUN_COMMAND, argument=command.args[0])
