"""Pydantic data models for walkgen.

This package defines:
- IR records exchanged between the compiler/wizard and the serializer
  (StepRecord, DescriptionRecord, SuggestionRecord, EndOfStepRecord)
- The runtime data model embedded in generated programs
  (Walkthrough, Step, Suggestion)

Example:
    >>> from walkgen.models import StepRecord, EndOfStepRecord
    >>> [StepRecord(title="Install"), EndOfStepRecord()]
"""

from .records import (
    DescriptionRecord,
    EndOfStepRecord,
    Record,
    RecordList,
    StepRecord,
    SuggestionKind,
    SuggestionRecord,
)
from .walkthrough import Step, StepStatus, Suggestion, Walkthrough

__all__ = [
    "DescriptionRecord",
    "EndOfStepRecord",
    "Record",
    "RecordList",
    "Step",
    "StepRecord",
    "StepStatus",
    "Suggestion",
    "SuggestionKind",
    "SuggestionRecord",
    "Walkthrough",
]
