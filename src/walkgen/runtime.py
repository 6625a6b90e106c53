"""Entry point embedded in generated walkthrough programs.

A generated script carries its walkthrough as a JSON string and calls
``main`` with its own file name, which keys the per-walkthrough history
and snippet stash under the state directory.
"""

import logging
import os
import sys
import tomllib
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .config import load_config, resolve_runtime_settings
from .constants import HISTORY_SUFFIX, SNIPPET_SUFFIX
from .core.history import CommandHistory
from .core.session import WalkthroughSession
from .core.snippets import SnippetStash
from .logging import configure_runtime_logging
from .models import Walkthrough
from .services import SubprocessRunner, choose_editor, load_line_history, terminal_mode

logger = logging.getLogger(__name__)


def main(
    data: str,
    identity: str = "walkthrough.py",
    env: Mapping[str, str] | None = None,
    config_dir: Path | None = None,
) -> int:
    """Run an interactive walkthrough session.

    Args:
        data: Serialized ``Walkthrough`` JSON
        identity: Name of the generated program, used for state file names
        env: Environment mapping (``os.environ`` if None)
        config_dir: Override for the user config directory

    Returns:
        Process exit code
    """
    env = os.environ if env is None else env
    configure_runtime_logging(env)
    console = Console()

    try:
        walkthrough = Walkthrough.model_validate_json(data)
    except ValidationError as e:
        console.print(f"[red]Error: Corrupt walkthrough data: {escape(str(e))}[/red]")
        return 1

    try:
        config = load_config(config_dir)
    except (tomllib.TOMLDecodeError, ValidationError, OSError) as e:
        console.print(f"[red]Error: Invalid config: {escape(str(e))}[/red]")
        return 1

    settings = resolve_runtime_settings(config, env)
    editor = choose_editor(settings.editor_preferences)
    logger.debug(f"editor={editor!r} shell={settings.shell!r} state={settings.state_dir}")

    history = CommandHistory(
        settings.state_dir / f"{identity}{HISTORY_SUFFIX}", settings.history_size
    )
    stash = SnippetStash(settings.state_dir / f"{identity}{SNIPPET_SUFFIX}")
    load_line_history(history.load())

    session = WalkthroughSession(
        walkthrough,
        SubprocessRunner(editor=editor, shell=settings.shell),
        stash,
        history=history,
        console=console,
        scratch_dir=settings.scratch_dir,
        page_size=settings.page_size,
        chrome_rows=settings.chrome_rows,
        min_page_size=settings.min_page_size,
    )
    with terminal_mode(sys.stdin):
        return session.run()
