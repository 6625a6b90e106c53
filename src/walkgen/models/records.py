"""Intermediate representation records.

The compiler and the wizard both emit a flat, ordered stream of these
records. One step's records always appear as::

    StepRecord, SuggestionRecord*, DescriptionRecord?, EndOfStepRecord

The serializer consumes the stream once to build the runtime data model.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter


class SuggestionKind(str, Enum):
    """Kinds of actionable suggestion."""

    CMD = "cmd"
    SNIPPET = "snippet"

    @classmethod
    def parse(cls, value: str | None) -> "SuggestionKind":
        """Map free-form kind text to a kind, defaulting to ``cmd``."""
        normalized = (value or "").strip().lower()
        for kind in cls:
            if kind.value == normalized:
                return kind
        return cls.CMD


class StepRecord(BaseModel):
    """Opens a step."""

    type: Literal["step"] = "step"
    title: str


class DescriptionRecord(BaseModel):
    """Description of the step currently open."""

    type: Literal["description"] = "description"
    text: str


class SuggestionRecord(BaseModel):
    """One suggestion of the step currently open."""

    type: Literal["suggestion"] = "suggestion"
    kind: SuggestionKind = SuggestionKind.CMD
    path: str = ""
    note: str = ""
    body: str = ""


class EndOfStepRecord(BaseModel):
    """Closes the step currently open."""

    type: Literal["end_of_step"] = "end_of_step"


Record = Annotated[
    StepRecord | DescriptionRecord | SuggestionRecord | EndOfStepRecord,
    Field(discriminator="type"),
]

RecordList = TypeAdapter(list[Record])
