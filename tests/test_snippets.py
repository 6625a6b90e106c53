"""Tests for the snippet stash and scratch buffers."""

from pathlib import Path

import pytest

from walkgen.constants import SNIPPET_END_MARKER, SNIPPET_START_MARKER
from walkgen.core.navigation import UserCommandError
from walkgen.core.scratch import (
    extract_snippet,
    render_command_buffer,
    render_snippet_buffer,
    scratch_file,
    strip_comment_lines,
)
from walkgen.core.snippets import PasteMode, SnippetStash
from walkgen.models import Step, Suggestion, SuggestionKind


@pytest.mark.unit
class TestPasteMode:
    """Tests for PasteMode.parse."""

    @pytest.mark.parametrize("value", [None, "", "a", "append", "APPEND"])
    def test_append_forms(self, value: str | None) -> None:
        assert PasteMode.parse(value) is PasteMode.APPEND

    @pytest.mark.parametrize("value", ["o", "overwrite", " Overwrite "])
    def test_overwrite_forms(self, value: str) -> None:
        assert PasteMode.parse(value) is PasteMode.OVERWRITE

    def test_unknown_mode(self) -> None:
        with pytest.raises(UserCommandError, match="append|overwrite"):
            PasteMode.parse("prepend")


@pytest.mark.unit
class TestSnippetStash:
    """Tests for SnippetStash."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        stash = SnippetStash(tmp_path / "none.snippet")
        assert stash.is_empty()
        assert stash.read() == ""

    def test_replace_overwrites_wholesale(self, tmp_path: Path) -> None:
        stash = SnippetStash(tmp_path / "state" / "w.snippet")
        stash.replace("first\n")
        stash.replace("second\n")
        assert stash.read() == "second\n"

    def test_touch_keeps_content(self, tmp_path: Path) -> None:
        stash = SnippetStash(tmp_path / "w.snippet")
        stash.replace("keep\n")
        assert stash.touch() == stash.path
        assert stash.read() == "keep\n"

    def test_paste_overwrite_then_append(self, tmp_path: Path) -> None:
        stash = SnippetStash(tmp_path / "w.snippet")
        stash.replace("X")
        target = tmp_path / "f.txt"
        target.write_text("old contents\n")

        stash.paste(target, PasteMode.OVERWRITE)
        assert target.read_text() == "X"

        stash.paste(target, PasteMode.APPEND)
        assert target.read_text() == "XX"

    def test_paste_append_creates_target(self, tmp_path: Path) -> None:
        stash = SnippetStash(tmp_path / "w.snippet")
        stash.replace("line\n")
        target = tmp_path / "new.txt"
        stash.paste(target)
        assert target.read_text() == "line\n"

    def test_paste_empty_stash(self, tmp_path: Path) -> None:
        stash = SnippetStash(tmp_path / "w.snippet")
        with pytest.raises(UserCommandError, match="stash empty"):
            stash.paste(tmp_path / "f.txt")
        assert not (tmp_path / "f.txt").exists()


def make_step(description: str = "") -> Step:
    return Step(index=1, title="Configure", description=description)


@pytest.mark.unit
class TestCommandBuffer:
    """Tests for cmd scratch buffers."""

    def test_header_and_body(self) -> None:
        buffer = render_command_buffer(2, make_step(), Suggestion(body="echo hi\n"))
        assert buffer.startswith("# Suggestion [2] - Configure\n")
        assert "# Lines starting with '#' are comments\n\necho hi\n" in buffer

    def test_context_comments(self) -> None:
        buffer = render_command_buffer(
            1, make_step("line one\nline two\n"), Suggestion(note="careful\n", body="ls")
        )
        assert "# Step description:\n#   line one\n#   line two\n#\n" in buffer
        assert "# Suggestion note:\n#   careful\n#\n" in buffer

    def test_strip_leaves_only_commands(self) -> None:
        buffer = render_command_buffer(
            1, make_step("desc\n"), Suggestion(note="note\n", body="echo a\n  # indented\necho b\n")
        )
        assert strip_comment_lines(buffer) == "\necho a\necho b\n"

    def test_strip_all_comments(self) -> None:
        assert strip_comment_lines("# only\n   # comments\n") == ""


@pytest.mark.unit
class TestSnippetBuffer:
    """Tests for snippet scratch buffers."""

    def test_body_between_markers(self) -> None:
        suggestion = Suggestion(kind=SuggestionKind.SNIPPET, note="hint\n", body="a = 1")
        buffer = render_snippet_buffer(make_step(), suggestion)
        assert f"{SNIPPET_START_MARKER}\na = 1\n{SNIPPET_END_MARKER}\n" in buffer
        assert "#   hint" in buffer
        assert "# Configure - snippet" in buffer

    def test_extract_round_trip(self) -> None:
        suggestion = Suggestion(kind=SuggestionKind.SNIPPET, body="x\n\ny\n")
        assert extract_snippet(render_snippet_buffer(make_step(), suggestion)) == "x\n\ny\n"

    def test_extract_empty_body(self) -> None:
        buffer = render_snippet_buffer(make_step(), Suggestion(kind=SuggestionKind.SNIPPET))
        assert extract_snippet(buffer) == ""

    def test_extract_without_start_marker(self) -> None:
        assert extract_snippet("no markers here\n") is None

    def test_extract_without_end_marker(self) -> None:
        assert extract_snippet(f"{SNIPPET_START_MARKER}\nrest\n") == "rest\n"


@pytest.mark.unit
class TestScratchFile:
    """Tests for scratch_file."""

    def test_file_removed_afterwards(self, tmp_path: Path) -> None:
        with scratch_file(tmp_path, "walk_pick_", ".sh", "echo hi\n") as path:
            assert path.read_text() == "echo hi\n"
            assert path.name.startswith("walk_pick_")
            assert path.suffix == ".sh"
        assert not path.exists()

    def test_file_removed_on_error(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError), scratch_file(tmp_path, "p", ".txt", "") as path:
            raise RuntimeError("boom")
        assert not path.exists()
