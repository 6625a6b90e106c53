"""Init command implementation."""

import typer

from ..config import CONFIG_FILENAME, get_config_dir, write_config_template
from ..output import get_output_context


def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Write the walkgen user config template."""
    ctx = get_output_context()

    config_dir = get_config_dir()
    config_path = config_dir / CONFIG_FILENAME

    if config_path.exists() and not force:
        ctx.console.print(f"[yellow]Config already exists:[/yellow] {config_path}")
        ctx.console.print("Use --force to overwrite it.")
        return

    try:
        written = write_config_template(config_dir)
    except OSError as e:
        ctx.error(f"Cannot write config: {e}")
        raise typer.Exit(1) from None

    ctx.result(
        {"config": str(written)},
        message=f"[green]Created config template:[/green] {written}",
    )
