"""Tests for release note formatting.

Run with: pytest tests/test_notes.py -v
"""

from __future__ import annotations

from release_reporter.notes import escape_mentions, first_line, format_note
from release_reporter.schemas import Author, Build


class TestHelpers:
    def test_escape_every_mention(self) -> None:
        assert escape_mentions("@alice and @bob") == "@ alice and @ bob"

    def test_escape_without_mentions(self) -> None:
        assert escape_mentions("plain") == "plain"

    def test_first_line_multiline(self) -> None:
        assert first_line("subject\nbody\nmore") == "subject"

    def test_first_line_single_line(self) -> None:
        assert first_line("subject") == "subject"

    def test_first_line_empty(self) -> None:
        assert first_line("") == ""


class TestFormatNote:
    """Tests for format_note."""

    def test_escapes_and_truncates(self) -> None:
        build = Build(
            state="failed",
            message="Fix @alice's bug\nmore detail",
            author=Author(name="Bob"),
        )
        assert format_note(build) == "Fix @ alice's bug *by Bob*"

    def test_missing_author(self) -> None:
        build = Build(state="running", message="Bump deps")
        assert format_note(build) == "Bump deps *by (unknown)*"

    def test_author_without_name(self) -> None:
        build = Build(state="running", message="Bump deps", author=Author())
        assert format_note(build).endswith("*by (unknown)*")

    def test_empty_author_name(self) -> None:
        build = Build(state="running", message="Bump deps", author=Author(name=""))
        assert format_note(build).endswith("*by (unknown)*")

    def test_mention_on_later_line_ignored(self) -> None:
        build = Build(
            state="failed",
            message="Subject\nco-authored-by @carol",
            author=Author(name="Dana"),
        )
        assert format_note(build) == "Subject *by Dana*"
