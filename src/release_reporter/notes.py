"""Turn builds into one-line release notes for the markdown report."""

from __future__ import annotations

from release_reporter.schemas import Build

UNKNOWN_AUTHOR = "(unknown)"


def escape_mentions(text: str) -> str:
    """Break up @mentions so the chat renderer doesn't ping anyone."""
    return text.replace("@", "@ ")


def first_line(text: str) -> str:
    """Return text up to the first newline, or all of it."""
    return text.split("\n", 1)[0]


def format_note(build: Build) -> str:
    """Format a build as ``<subject line> *by <author>*``.

    Example:
        "Fix @alice's bug\\nmore detail" by Bob -> "Fix @ alice's bug *by Bob*"
    """
    author = (build.author.name if build.author else None) or UNKNOWN_AUTHOR
    return f"{first_line(escape_mentions(build.message))} *by {author}*"
