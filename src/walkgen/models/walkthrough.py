"""Runtime data model for a generated walkthrough.

Steps own contiguous, non-overlapping slices of one global suggestion
table. The model is embedded into the generated program as JSON and is
immutable at runtime apart from step status, which the session tracks.
"""

from enum import Enum

from pydantic import BaseModel, Field

from .records import SuggestionKind


class StepStatus(str, Enum):
    """Completion status of a step."""

    TODO = "todo"
    DONE = "done"


class Suggestion(BaseModel):
    """One actionable item within a step.

    Attributes:
        kind: ``cmd`` items are edited then executed; ``snippet`` items are
            edited then stashed.
        path: Optional target path shown next to the kind.
        note: Explanatory text shown above the body.
        body: Command text or snippet text; may be empty or multi-line.
    """

    kind: SuggestionKind = SuggestionKind.CMD
    path: str = ""
    note: str = ""
    body: str = ""


class Step(BaseModel):
    """One stage of the walkthrough.

    Attributes:
        index: 1-based position.
        title: Single-line display title.
        description: Optional multi-line text rendered before suggestions.
        status: ``todo`` until the user advances past the step.
        start: Offset of the step's first suggestion in the global table.
        length: Number of suggestions the step owns.
    """

    index: int = Field(ge=1, description="1-based step position")
    title: str
    description: str = ""
    status: StepStatus = StepStatus.TODO
    start: int = Field(default=0, ge=0, description="Offset into the suggestion table")
    length: int = Field(default=0, ge=0, description="Number of owned suggestions")


class Walkthrough(BaseModel):
    """Step table plus the global suggestion table."""

    name: str = "walkthrough"
    steps: list[Step] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def step(self, index: int) -> Step:
        """Return the step at 1-based ``index``."""
        if not 1 <= index <= len(self.steps):
            raise IndexError(f"step {index} out of range 1..{len(self.steps)}")
        return self.steps[index - 1]

    def suggestions_for(self, index: int) -> list[Suggestion]:
        """Return the suggestion slice owned by step ``index``."""
        step = self.step(index)
        return self.suggestions[step.start : step.start + step.length]
