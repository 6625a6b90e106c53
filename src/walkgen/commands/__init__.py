"""CLI command implementations for walkgen.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .build import build
from .init import init

__all__ = [
    "build",
    "init",
]
