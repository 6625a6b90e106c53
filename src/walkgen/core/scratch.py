"""Scratch buffers handed to the external editor.

A picked ``cmd`` suggestion becomes a shell script whose comment lines
carry context; a picked ``snippet`` becomes a text buffer where only the
lines between the snippet markers are kept.
"""

import contextlib
import os
import re
import tempfile
from collections.abc import Iterator
from pathlib import Path

from ..constants import SNIPPET_END_MARKER, SNIPPET_START_MARKER
from ..models import Step, Suggestion

COMMENT_LINE_RE = re.compile(r"^\s*#")
BANNER = "# " + "-" * 46


def _comment_block(heading: str, text: str) -> list[str]:
    lines = [f"# {heading}"]
    lines.extend(f"#   {line}" for line in text.splitlines())
    lines.append("#")
    return lines


def render_command_buffer(number: int, step: Step, suggestion: Suggestion) -> str:
    """Build the editable script for a ``cmd`` suggestion."""
    lines = [f"# Suggestion [{number}] - {step.title}"]
    if step.description:
        lines.extend(_comment_block("Step description:", step.description))
    if suggestion.note:
        lines.extend(_comment_block("Suggestion note:", suggestion.note))
    lines.append("# Lines starting with '#' are comments")
    lines.append("")
    return "\n".join(lines) + "\n" + suggestion.body


def strip_comment_lines(text: str) -> str:
    """Drop every line whose first non-blank character is ``#``."""
    kept = [line for line in text.splitlines() if not COMMENT_LINE_RE.match(line)]
    return "\n".join(kept) + ("\n" if kept else "")


def render_snippet_buffer(step: Step, suggestion: Suggestion) -> str:
    """Build the editable buffer for a ``snippet`` suggestion."""
    lines = [BANNER, f"# {step.title} - snippet", BANNER]
    if suggestion.note:
        lines.extend(_comment_block("Note:", suggestion.note))
    lines.append("# Edit the snippet between the markers. On save/exit it will be stashed.")
    lines.append(SNIPPET_START_MARKER)
    body = suggestion.body
    if body and not body.endswith("\n"):
        body += "\n"
    return "\n".join(lines) + "\n" + body + SNIPPET_END_MARKER + "\n"


def extract_snippet(text: str) -> str | None:
    """Return the text between the snippet markers.

    Returns None when the start marker is missing. A missing end marker
    captures everything after the start marker.
    """
    captured: list[str] = []
    inside = False
    for line in text.splitlines():
        if not inside:
            if line == SNIPPET_START_MARKER:
                inside = True
            continue
        if line.startswith(SNIPPET_END_MARKER):
            break
        captured.append(line + "\n")
    if not inside:
        return None
    return "".join(captured)


@contextlib.contextmanager
def scratch_file(directory: Path, prefix: str, suffix: str, content: str) -> Iterator[Path]:
    """Write ``content`` to a temporary file that is removed afterwards."""
    directory.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        yield path
    finally:
        path.unlink(missing_ok=True)
