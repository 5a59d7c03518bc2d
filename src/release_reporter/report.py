"""Markdown assembly for the release report.

Each pipeline with something to release becomes one block:

    - `serve-api` build [1234](https://buildkite.com/...), Fix login *by Sam*

or, with several candidates:

    - `serve-api` build [1234](https://buildkite.com/...):
        - Fix login *by Sam*
        - Bump deps *by Alex*

Pipelines with nothing to release are left out entirely.
"""

from __future__ import annotations

from collections.abc import Iterable

from release_reporter.notes import format_note
from release_reporter.schemas import PipelineReport
from release_reporter.selection import SelectionMode, select_builds


def build_item_link(report: PipelineReport) -> str:
    """Markdown link to the pipeline's latest build."""
    return f"[{report.number}]({report.url or ''})"


def format_pipeline_block(
    report: PipelineReport, mode: SelectionMode = SelectionMode.PREFIX
) -> str | None:
    """Render one pipeline, or None if none of its builds need release."""
    notes = [format_note(build) for build in select_builds(report.builds, mode)]
    if not notes:
        return None

    header = f"- `{report.pipeline}` build {build_item_link(report)}"
    if len(notes) == 1:
        return f"{header}, {notes[0]}"

    lines = [f"{header}:"]
    lines.extend(f"    - {note}" for note in notes)
    return "\n".join(lines)


def assemble_report(
    reports: Iterable[PipelineReport], mode: SelectionMode = SelectionMode.PREFIX
) -> str:
    """Render all pipelines as a markdown list.

    Args:
        reports: Per-pipeline results, in the order they should appear
        mode: Release candidate selection mode

    Returns:
        The markdown list, or an empty string if nothing needs release
    """
    blocks = (format_pipeline_block(report, mode) for report in reports)
    return "\n".join(block for block in blocks if block is not None)
