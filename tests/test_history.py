"""Tests for persistent command history."""

from pathlib import Path

import pytest

from walkgen.core.history import CommandHistory


@pytest.mark.unit
class TestCommandHistory:
    """Tests for CommandHistory."""

    def test_load_missing_file(self, tmp_path: Path) -> None:
        assert CommandHistory(tmp_path / "w.hist").load() == []

    def test_append_creates_parent(self, tmp_path: Path) -> None:
        history = CommandHistory(tmp_path / "state" / "walkthrough" / "w.hist")
        history.append("ls")
        history.append("next")
        assert history.load() == ["ls", "next"]

    def test_blank_entries_skipped(self, tmp_path: Path) -> None:
        history = CommandHistory(tmp_path / "w.hist")
        history.append("")
        history.append("   ")
        assert history.load() == []
        assert not history.path.exists()

    def test_bounded_to_max_entries(self, tmp_path: Path) -> None:
        history = CommandHistory(tmp_path / "w.hist", max_entries=3)
        for i in range(5):
            history.append(f"cmd {i}")
        assert history.load() == ["cmd 2", "cmd 3", "cmd 4"]
        assert history.path.read_text().splitlines() == ["cmd 2", "cmd 3", "cmd 4"]

    def test_unwritable_location_is_not_fatal(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        history = CommandHistory(blocker / "w.hist")
        history.append("ls")
        assert "Could not write history" in caplog.text
