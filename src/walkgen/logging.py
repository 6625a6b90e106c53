"""Logging configuration for walkgen.

Two entry points share one RichHandler setup: the ``walkgen`` CLI, driven by
its global flags, and generated walkthrough programs, which stay quiet
unless ``WALKGEN_DEBUG`` is set in their environment.
"""

import logging
import os
import sys
from collections.abc import Mapping
from enum import IntEnum
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "walkgen"
DEBUG_ENV = "WALKGEN_DEBUG"
FALSE_WORDS = frozenset({"", "0", "false", "no", "off"})


class LogLevel(IntEnum):
    """Log level enumeration."""

    QUIET = logging.WARNING
    NORMAL = logging.INFO
    VERBOSE = logging.DEBUG


def _install_handler(level: int, stream: TextIO, no_color: bool, detailed: bool) -> None:
    handler = RichHandler(
        console=Console(file=stream, no_color=no_color),
        show_time=detailed,
        show_path=detailed,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    no_color: bool = False,
    stream: TextIO = sys.stderr,
    debug: bool = False,
) -> Console:
    """Configure logging based on CLI options.

    Args:
        verbosity: Number of -v flags (0=normal, 1=verbose, 2+=debug)
        quiet: Suppress non-error output (takes precedence over debug/verbosity)
        no_color: Disable colored output
        stream: Output stream for logs
        debug: Enable debug logging, including the compiler's parse trace

    Returns:
        Configured Rich console for output

    Note:
        Flag precedence: quiet > debug > verbosity
    """
    if quiet:
        level = LogLevel.QUIET
    elif debug or verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = LogLevel.VERBOSE
    else:
        level = LogLevel.NORMAL

    _install_handler(level, stream, no_color, detailed=debug or verbosity >= 2)

    return Console(
        stderr=True,
        force_terminal=not no_color,
        no_color=no_color,
    )


def enable_debug_trace() -> None:
    """Lower walkgen's own loggers to DEBUG without touching third-party ones.

    Used by ``build --debug`` to show the parse trace and record dump even
    when the global level is INFO.
    """
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)


def debug_requested(env: Mapping[str, str] | None = None) -> bool:
    """Return True if ``WALKGEN_DEBUG`` is set to anything but a false word."""
    env = os.environ if env is None else env
    return env.get(DEBUG_ENV, "").strip().lower() not in FALSE_WORDS


def configure_runtime_logging(
    env: Mapping[str, str] | None = None,
    stream: TextIO = sys.stderr,
) -> bool:
    """Configure logging for a generated walkthrough program.

    The session owns the terminal, so only warnings reach it unless
    ``WALKGEN_DEBUG`` asks for the debug trace.

    Returns:
        True if debug logging was enabled
    """
    debug = debug_requested(env)
    _install_handler(
        logging.DEBUG if debug else LogLevel.QUIET, stream, no_color=False, detailed=debug
    )
    return debug
