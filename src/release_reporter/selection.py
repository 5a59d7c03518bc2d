"""Release candidate selection.

Decides which builds still need someone to press the release button. A build
needs release when it failed, is still running, or is sitting on a block
step.

Two selection modes exist:
- PREFIX (default): the leading run of builds needing release, newest first,
  stopping at the first healthy build. This answers "what has piled up since
  the last build that went out cleanly".
- ALL: every build needing release on the page, wherever it sits.

Both rely on builds arriving newest first, which is how the builds endpoint
orders them.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from itertools import takewhile
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from release_reporter.schemas import Build

RELEASE_STATES = frozenset({"failed", "running"})


class SelectionMode(StrEnum):
    """Which builds count as release candidates."""

    PREFIX = "prefix"
    ALL = "all"


def needs_release(build: Build) -> bool:
    """True if the build failed, is running, or is blocked."""
    return build.state in RELEASE_STATES or build.blocked


def select_release_candidates(builds: Iterable[Build]) -> list[Build]:
    """Return the leading run of builds that need release.

    A qualifying build that comes after a healthy one is not included.
    """
    return list(takewhile(needs_release, builds))


def select_all_pending(builds: Iterable[Build]) -> list[Build]:
    """Return every build that needs release, keeping the input order."""
    return [build for build in builds if needs_release(build)]


def select_builds(
    builds: Iterable[Build], mode: SelectionMode = SelectionMode.PREFIX
) -> list[Build]:
    """Dispatch to the selector for ``mode``."""
    if mode == SelectionMode.ALL:
        return select_all_pending(builds)
    return select_release_candidates(builds)
