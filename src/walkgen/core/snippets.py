"""Persistent snippet stash.

A single text blob per generated walkthrough. Picking a snippet replaces
it wholesale; ``:snippet`` commands show, edit, paste, or open it.
"""

from enum import Enum
from pathlib import Path

from .navigation import UserCommandError


class PasteMode(str, Enum):
    """How a paste combines the stash with the target file."""

    APPEND = "append"
    OVERWRITE = "overwrite"

    @classmethod
    def parse(cls, value: str | None) -> "PasteMode":
        normalized = (value or "").strip().lower()
        if normalized in ("", "a", "append"):
            return cls.APPEND
        if normalized in ("o", "overwrite"):
            return cls.OVERWRITE
        raise UserCommandError("mode must be append|overwrite")


class SnippetStash:
    """File-backed single snippet buffer."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def is_empty(self) -> bool:
        try:
            return self.path.stat().st_size == 0
        except FileNotFoundError:
            return True

    def read(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""

    def replace(self, text: str) -> None:
        """Overwrite the stash with ``text``."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")

    def touch(self) -> Path:
        """Ensure the stash file exists without truncating it."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)
        return self.path

    def paste(self, target: Path, mode: PasteMode = PasteMode.APPEND) -> None:
        """Write the stash into ``target``.

        Raises:
            UserCommandError: If the stash is empty
        """
        if self.is_empty():
            raise UserCommandError("stash empty")
        content = self.read()
        if mode is PasteMode.OVERWRITE:
            target.write_text(content, encoding="utf-8")
        else:
            with open(target, "a", encoding="utf-8") as f:
                f.write(content)
