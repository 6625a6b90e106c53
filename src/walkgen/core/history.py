"""Persistent command history for a generated walkthrough."""

import logging
from pathlib import Path

from ..constants import DEFAULT_HISTORY_SIZE

logger = logging.getLogger(__name__)


class CommandHistory:
    """Append-only history file bounded to ``max_entries`` lines."""

    def __init__(self, path: Path, max_entries: int = DEFAULT_HISTORY_SIZE) -> None:
        self.path = path
        self.max_entries = max_entries

    def _read(self) -> list[str]:
        try:
            return self.path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []

    def load(self) -> list[str]:
        """Return stored entries, oldest first; empty if none yet."""
        return self._read()[-self.max_entries :]

    def append(self, entry: str) -> None:
        """Record a non-blank input line and trim to the bound."""
        if not entry.strip() or "\n" in entry:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(entry + "\n")
            entries = self._read()
            if len(entries) > self.max_entries:
                kept = entries[-self.max_entries :]
                self.path.write_text("\n".join(kept) + "\n", encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write history {self.path}: {e}")
