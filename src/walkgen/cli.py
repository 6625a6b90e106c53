"""Walkgen CLI: generate interactive step-by-step walkthrough programs."""

import typer

from walkgen import __version__

from .commands import build, init
from .logging import configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"walkgen {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="walkgen",
    help="Generate interactive walkthrough programs from a spec or a wizard",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging",
    ),
) -> None:
    """Walkgen CLI - interactive walkthrough generator."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
        debug=debug,
    )
    set_output_context(OutputContext(console=console, json_mode=json_output))


app.command()(build)
app.command()(init)


if __name__ == "__main__":
    app()
