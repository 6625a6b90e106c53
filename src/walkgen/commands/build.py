"""Build command: compile a spec (or run the wizard) into a walkthrough program."""

import logging
import tomllib
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from ..config import load_config
from ..core import (
    CompileError,
    WizardError,
    build_walkthrough,
    compile_file,
    run_wizard,
    write_artifact,
)
from ..logging import enable_debug_trace
from ..models import Record, RecordList
from ..output import get_output_context
from ..services import is_interactive

logger = logging.getLogger(__name__)


def _collect_records(spec: Path | None, wizard: bool) -> list[Record]:
    """Produce IR records from the spec file or the interactive wizard."""
    if wizard:
        if not is_interactive():
            raise WizardError("Wizard requires an interactive terminal")
        return run_wizard(console=get_output_context().console)
    assert spec is not None
    return compile_file(spec)


def build(
    spec: Annotated[
        Path | None,
        typer.Option(
            "--from",
            "-f",
            help="Spec file to compile",
        ),
    ] = None,
    wizard: Annotated[
        bool,
        typer.Option(
            "--wizard",
            "-w",
            help="Build the walkthrough interactively",
        ),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Generated program path (default: from config, else walkthrough.py)",
        ),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option(
            "--name",
            "-n",
            help="Walkthrough name shown in the generated program",
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Trace parsing and dump the intermediate records",
        ),
    ] = False,
) -> None:
    """Generate an interactive walkthrough program.

    Use --from to compile a spec file, or --wizard to answer prompts.
    """
    ctx = get_output_context()

    if (spec is None) == (not wizard):
        ctx.error(
            "Specify exactly one of --from SPEC or --wizard",
            next_action="walkgen build --from walkthrough.yaml",
        )
        raise typer.Exit(2)

    if debug:
        enable_debug_trace()

    try:
        config = load_config()
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        ctx.error(f"Invalid config: {e}", next_action="walkgen init --force")
        raise typer.Exit(1) from None

    # --- Front end ---

    try:
        records = _collect_records(spec, wizard)
    except (CompileError, WizardError) as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    if debug:
        logger.debug(RecordList.dump_json(records, indent=2).decode())

    # --- Serialize ---

    walkthrough_name = name or (spec.stem if spec is not None else "walkthrough")
    try:
        walkthrough = build_walkthrough(records, name=walkthrough_name)
    except (CompileError, ValueError) as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    target = output or Path(config.build.output)
    try:
        written = write_artifact(walkthrough, target)
    except OSError as e:
        ctx.error(f"Cannot write {target}: {e}")
        raise typer.Exit(1) from None

    ctx.result(
        {
            "output": str(written),
            "steps": walkthrough.total_steps,
            "suggestions": len(walkthrough.suggestions),
        },
        message=(
            f"[green]Generated:[/green] {written} "
            f"({walkthrough.total_steps} steps, {len(walkthrough.suggestions)} suggestions)"
        ),
    )
