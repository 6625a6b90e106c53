"""Configuration management for walkgen.

Settings come from an optional user config file
(``$XDG_CONFIG_HOME/walkgen/config.toml``) and are overlaid at runtime by
the conventional environment variables (``VISUAL``, ``EDITOR``, ``TMPDIR``,
``XDG_STATE_HOME``, ``WALK_SUGG_PAGESIZE``, ``HISTSIZE``).
"""

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field

from .constants import (
    CHROME_ROWS,
    DEFAULT_HISTORY_SIZE,
    DEFAULT_OUTPUT,
    DEFAULT_SHELL,
    MIN_PAGE_SIZE,
    STATE_SUBDIR,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"


class BuildConfig(BaseModel):
    """Configuration for the generator."""

    output: str = DEFAULT_OUTPUT


class RuntimeConfig(BaseModel):
    """Configuration for generated walkthrough programs."""

    editor: str | None = None  # Used after VISUAL/EDITOR, before PATH probing
    shell: str = DEFAULT_SHELL
    page_size: int | None = Field(default=None, ge=1)
    history_size: int = Field(default=DEFAULT_HISTORY_SIZE, ge=1)
    chrome_rows: int = Field(default=CHROME_ROWS, ge=0)
    min_page_size: int = Field(default=MIN_PAGE_SIZE, ge=1)


class WalkgenConfig(BaseModel):
    """Root configuration for walkgen."""

    build: BuildConfig = Field(default_factory=BuildConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)


class RuntimeSettings(BaseModel):
    """Effective runtime settings after applying the environment."""

    editor_preferences: list[str] = Field(default_factory=list)
    shell: str = DEFAULT_SHELL
    scratch_dir: Path = Path("/tmp")
    state_dir: Path
    page_size: int | None = None
    history_size: int = DEFAULT_HISTORY_SIZE
    chrome_rows: int = CHROME_ROWS
    min_page_size: int = MIN_PAGE_SIZE


def get_config_dir(env: Mapping[str, str] | None = None) -> Path:
    """Get the walkgen user config directory."""
    env = os.environ if env is None else env
    base = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "walkgen"


def load_config(config_dir: Path | None = None) -> WalkgenConfig:
    """Load config from config.toml.

    Args:
        config_dir: Directory holding config.toml (user config dir if None)

    Returns:
        Loaded configuration, or defaults if config.toml doesn't exist
    """
    config_path = (config_dir or get_config_dir()) / CONFIG_FILENAME
    if not config_path.exists():
        return WalkgenConfig()
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return WalkgenConfig.model_validate(data)


def write_config_template(config_dir: Path) -> Path:
    """Write default config.toml template.

    Args:
        config_dir: Directory to write config.toml into

    Returns:
        Path to the written config file
    """
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / CONFIG_FILENAME
    template = {
        "build": {"output": DEFAULT_OUTPUT},
        "runtime": {
            "editor": "vi",
            "shell": DEFAULT_SHELL,
            "page_size": 8,
            "history_size": DEFAULT_HISTORY_SIZE,
            "chrome_rows": CHROME_ROWS,
            "min_page_size": MIN_PAGE_SIZE,
        },
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path


def _env_int(env: Mapping[str, str], name: str) -> int | None:
    """Read a positive integer from the environment, ignoring junk."""
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.debug(f"Ignoring non-integer {name}={raw!r}")
        return None
    if value < 1:
        logger.debug(f"Ignoring non-positive {name}={value}")
        return None
    return value


def resolve_runtime_settings(
    config: WalkgenConfig | None = None,
    env: Mapping[str, str] | None = None,
) -> RuntimeSettings:
    """Overlay environment variables on the runtime config.

    Precedence for each setting is environment first, then config file,
    then built-in default.
    """
    config = config or WalkgenConfig()
    env = os.environ if env is None else env
    runtime = config.runtime

    editors = [env.get("VISUAL", ""), env.get("EDITOR", ""), runtime.editor or ""]
    state_root = env.get("XDG_STATE_HOME") or str(Path.home() / ".local" / "state")

    return RuntimeSettings(
        editor_preferences=[e for e in editors if e.strip()],
        shell=runtime.shell,
        scratch_dir=Path(env.get("TMPDIR") or "/tmp"),
        state_dir=Path(state_root) / STATE_SUBDIR,
        page_size=_env_int(env, "WALK_SUGG_PAGESIZE") or runtime.page_size,
        history_size=_env_int(env, "HISTSIZE") or runtime.history_size,
        chrome_rows=runtime.chrome_rows,
        min_page_size=runtime.min_page_size,
    )
