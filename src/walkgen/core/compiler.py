"""Document compiler: spec text to IR records.

The spec format is a small, indentation-sensitive YAML subset::

    ---
    step: Configure the service
    desc: |
      Multi-line description.
    suggestions:
      - kind: cmd
        note: Check the unit
        cmd: systemctl status myservice
      - kind: snippet
        content: |
          key = value
    ---

Block literals (a key whose value is ``|``) capture every following line
indented deeper than the key, stripping ``key_indent + 1`` leading columns.
Blank lines are kept. The first non-blank line at or above the key's
indentation ends the block and is pushed back onto the cursor so the outer
loop processes it. Unrecognized lines are ignored and traced at DEBUG.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ..constants import BLOCK_INDICATOR, DOCUMENT_SEPARATOR
from ..models import (
    DescriptionRecord,
    EndOfStepRecord,
    Record,
    StepRecord,
    SuggestionKind,
    SuggestionRecord,
)

logger = logging.getLogger(__name__)

SEPARATOR_RE = re.compile(rf"^[ \t]*{re.escape(DOCUMENT_SEPARATOR)}[ \t]*$")
STEP_FIELD_RE = re.compile(
    r"^(?P<indent>[ \t]*)(?P<key>step|desc|suggestions|suggestion):[ \t]*(?P<value>.*)$"
)
SUGGESTION_FIELD_RE = re.compile(
    r"^(?P<indent>[ \t]*)(?P<key>kind|note|cmd|content):[ \t]*(?P<value>.*)$"
)
DASH_RE = re.compile(r"^(?P<indent>[ \t]*)-(?![-])[ \t]*(?P<rest>.*)$")
LIST_KEY_VALUE_RE = re.compile(r"^(#.*)?$")


class CompileError(Exception):
    """Spec could not be compiled into any steps."""


def indentation(line: str) -> int:
    """Count leading spaces and tabs (each tab is one column)."""
    return len(line) - len(line.lstrip(" \t"))


def is_block_indicator(value: str) -> bool:
    """Return True if a field value opens a block literal."""
    return value.strip() == BLOCK_INDICATOR


def split_lines(text: str) -> list[str]:
    """Split text into lines without inventing a trailing blank line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class LineCursor:
    """Iterator over lines with one line of lookahead.

    ``unread`` pushes a single line back so the next call to ``next_line``
    returns it again. Trailing carriage returns are removed.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self._pushed: tuple[str, int] | None = None
        self._count = 0
        self.line_number = 0

    def next_line(self) -> str | None:
        """Return the next line, or None when input is exhausted."""
        if self._pushed is not None:
            line, self.line_number = self._pushed
            self._pushed = None
            return line
        try:
            raw = next(self._lines)
        except StopIteration:
            return None
        self._count += 1
        self.line_number = self._count
        return raw[:-1] if raw.endswith("\r") else raw

    def peek(self) -> str | None:
        """Return the next line without consuming it."""
        number = self.line_number
        line = self.next_line()
        if line is not None:
            self.unread(line)
        self.line_number = number
        return line

    def unread(self, line: str) -> None:
        """Push ``line`` back; only one line may be pending."""
        if self._pushed is not None:
            raise RuntimeError("LineCursor supports a single line of pushback")
        self._pushed = (line, self.line_number)

    def __iter__(self) -> Iterator[str]:
        while (line := self.next_line()) is not None:
            yield line


def read_block(cursor: LineCursor, key_indent: int) -> str:
    """Capture a block literal whose key sits at ``key_indent``.

    Args:
        cursor: Cursor positioned on the line after the key
        key_indent: Indentation of the key line

    Returns:
        Captured body, one newline-terminated line per input line
    """
    margin = key_indent + 1
    body: list[str] = []
    for line in cursor:
        if not line.strip():
            body.append("\n")
            continue
        if indentation(line) <= key_indent:
            cursor.unread(line)
            break
        body.append(line[margin:] + "\n")
    return "".join(body)


@dataclass
class _PendingSuggestion:
    kind: str = ""
    note: str = ""
    cmd: str = ""
    content: str = ""

    def to_record(self) -> SuggestionRecord:
        kind = SuggestionKind.parse(self.kind)
        body = self.cmd if kind is SuggestionKind.CMD else self.content
        return SuggestionRecord(kind=kind, note=self.note, body=body)


@dataclass
class _PendingStep:
    title: str | None = None
    description: str = ""
    suggestions: list[SuggestionRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.description or self.suggestions)


class SpecCompiler:
    """Single-pass compiler from spec lines to IR records."""

    def __init__(self) -> None:
        self.records: list[Record] = []
        self._step = _PendingStep()
        self._suggestion: _PendingSuggestion | None = None
        self._list_indent: int | None = None

    def compile(self, lines: Iterable[str]) -> list[Record]:
        """Compile lines into records; the last step closes at end of input."""
        cursor = LineCursor(lines)
        for line in cursor:
            self._process(line, cursor)
        self._close_step()
        return self.records

    # -- outer dispatch -------------------------------------------------

    def _process(self, line: str, cursor: LineCursor) -> None:
        if SEPARATOR_RE.match(line):
            self._close_step()
            return

        match = STEP_FIELD_RE.match(line)
        if match:
            self._step_field(match, cursor)
            return

        if self._list_indent is not None:
            self._list_line(line, cursor)
            return

        if self._suggestion is not None:
            self._suggestion_field(line, indentation(line), cursor)
            return

        if line.strip():
            logger.debug(f"line {cursor.line_number}: ignored outside any field: {line!r}")

    def _step_field(self, match: re.Match[str], cursor: LineCursor) -> None:
        key = match.group("key")
        value = match.group("value")
        key_indent = len(match.group("indent"))

        if key == "step":
            if self._step.title is not None:
                self._close_step()
            self._step.title = value
            logger.debug(f"line {cursor.line_number}: step {value!r}")
        elif key == "desc":
            if is_block_indicator(value):
                self._step.description = read_block(cursor, key_indent)
            elif value:
                self._step.description += value + "\n"
        elif key == "suggestions":
            if LIST_KEY_VALUE_RE.match(value.strip()):
                self._list_indent = key_indent
            else:
                logger.debug(f"line {cursor.line_number}: ignored inline suggestions value")
        elif LIST_KEY_VALUE_RE.match(value.strip()):
            # Legacy single-suggestion form
            self._flush_suggestion()
            self._list_indent = None
            self._suggestion = _PendingSuggestion()
        else:
            logger.debug(f"line {cursor.line_number}: ignored inline suggestion value")

    def _list_line(self, line: str, cursor: LineCursor) -> None:
        dash = DASH_RE.match(line)
        if dash:
            self._flush_suggestion()
            self._suggestion = _PendingSuggestion()
            rest = dash.group("rest")
            if rest:
                self._suggestion_field(rest, len(dash.group("indent")), cursor)
            return

        if not line.strip():
            return

        if indentation(line) <= self._list_indent:  # type: ignore[operator]
            logger.debug(f"line {cursor.line_number}: suggestions list closed")
            self._list_indent = None
            cursor.unread(line)
            return

        if self._suggestion is None:
            logger.debug(f"line {cursor.line_number}: ignored list line before any '-'")
            return
        self._suggestion_field(line, indentation(line), cursor)

    def _suggestion_field(self, text: str, key_indent: int, cursor: LineCursor) -> None:
        """Apply a kind/note/cmd/content field to the open suggestion."""
        assert self._suggestion is not None
        match = SUGGESTION_FIELD_RE.match(text)
        if not match:
            if text.strip():
                logger.debug(f"line {cursor.line_number}: ignored in suggestion: {text!r}")
            return

        key = match.group("key")
        value = match.group("value")
        if key == "kind":
            self._suggestion.kind = value
            return

        if is_block_indicator(value):
            setattr(self._suggestion, key, read_block(cursor, key_indent))
        elif value:
            setattr(self._suggestion, key, getattr(self._suggestion, key) + value + "\n")

    # -- finalization ---------------------------------------------------

    def _flush_suggestion(self) -> None:
        if self._suggestion is None:
            return
        record = self._suggestion.to_record()
        self._step.suggestions.append(record)
        self._suggestion = None
        logger.debug(
            f"+suggestion kind={record.kind.value} note_len={len(record.note)} "
            f"body_len={len(record.body)}"
        )

    def _close_step(self) -> None:
        self._flush_suggestion()
        self._list_indent = None
        step, self._step = self._step, _PendingStep()

        if step.title is None:
            if not step.is_empty:
                logger.debug("Dropping fields that do not belong to any step")
            return

        self.records.append(StepRecord(title=step.title))
        self.records.extend(step.suggestions)
        if step.description:
            self.records.append(DescriptionRecord(text=step.description))
        self.records.append(EndOfStepRecord())
        logger.debug(f"end step {step.title!r} ({len(step.suggestions)} suggestions)")


def compile_text(text: str) -> list[Record]:
    """Compile spec text into IR records.

    Raises:
        CompileError: If no steps were found
    """
    records = SpecCompiler().compile(split_lines(text))
    if not any(isinstance(r, StepRecord) for r in records):
        raise CompileError("No steps found in spec")
    return records


def compile_file(path: Path) -> list[Record]:
    """Read and compile a spec file.

    Raises:
        CompileError: If the file is missing, unreadable, or has no steps
    """
    if not path.is_file():
        raise CompileError(f"Spec file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CompileError(f"Cannot read spec file {path}: {e}") from e
    logger.debug(f"Compiling {path}")
    return compile_text(text)
