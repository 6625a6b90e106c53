"""Serializer: IR records to the runtime data model and generated artifact."""

import logging
import stat
from collections.abc import Iterable
from pathlib import Path

from .. import __version__
from ..models import (
    DescriptionRecord,
    EndOfStepRecord,
    Record,
    Step,
    StepRecord,
    Suggestion,
    SuggestionRecord,
    Walkthrough,
)
from .compiler import CompileError

logger = logging.getLogger(__name__)

ARTIFACT_TEMPLATE = '''#!/usr/bin/env python3
"""{title} (generated by walkgen {version}; do not edit)."""

import sys
from pathlib import Path

from walkgen.runtime import main

WALKTHROUGH_JSON = {payload}

if __name__ == "__main__":
    sys.exit(main(WALKTHROUGH_JSON, identity=Path(__file__).name))
'''


def build_walkthrough(records: Iterable[Record], name: str = "walkthrough") -> Walkthrough:
    """Project an IR record stream onto the runtime data model.

    Assigns 1-based step indexes and contiguous suggestion offsets in
    first-seen order. Every step starts as ``todo``.

    Args:
        records: Ordered record stream from the compiler or wizard
        name: Display name of the walkthrough

    Returns:
        The runtime data model

    Raises:
        CompileError: If the stream contains no steps
        ValueError: If records appear outside a Step/EndOfStep pair
    """
    steps: list[Step] = []
    suggestions: list[Suggestion] = []
    current: Step | None = None

    for record in records:
        if isinstance(record, StepRecord):
            if current is not None:
                raise ValueError(f"Step {current.title!r} was not closed before the next step")
            current = Step(index=len(steps) + 1, title=record.title, start=len(suggestions))
        elif current is None:
            raise ValueError(f"{type(record).__name__} outside of a step")
        elif isinstance(record, SuggestionRecord):
            suggestions.append(
                Suggestion(kind=record.kind, path=record.path, note=record.note, body=record.body)
            )
        elif isinstance(record, DescriptionRecord):
            current.description = record.text
        elif isinstance(record, EndOfStepRecord):
            current.length = len(suggestions) - current.start
            steps.append(current)
            current = None

    if current is not None:
        raise ValueError(f"Step {current.title!r} was never closed")
    if not steps:
        raise CompileError("No steps found")

    logger.debug(f"Serialized {len(steps)} steps, {len(suggestions)} suggestions")
    return Walkthrough(name=name, steps=steps, suggestions=suggestions)


def render_artifact(walkthrough: Walkthrough) -> str:
    """Render the source of the generated walkthrough program."""
    payload = walkthrough.model_dump_json()
    title = walkthrough.name.replace('"""', "'''").replace("\\", "/")
    return ARTIFACT_TEMPLATE.format(title=title, version=__version__, payload=repr(payload))


def write_artifact(walkthrough: Walkthrough, output: Path) -> Path:
    """Write the generated program and mark it executable.

    Args:
        walkthrough: Runtime data model to embed
        output: Destination path

    Returns:
        The written path
    """
    output.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = output.with_name(output.name + ".tmp")
    tmp_path.write_text(render_artifact(walkthrough), encoding="utf-8")
    mode = tmp_path.stat().st_mode
    tmp_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    tmp_path.replace(output)
    logger.debug(f"Wrote {output}")
    return output
