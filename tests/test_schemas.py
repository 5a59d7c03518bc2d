"""Tests for the Pydantic schemas.

These tests verify that:
- Builds parse from the API's JSON shape, tolerating missing/null fields
- Builds are immutable once parsed
- Pipeline refs accept both mapping and pair forms
- Pipeline reports derive their header link from the newest build

Run with: pytest tests/test_schemas.py -v
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from release_reporter.schemas import Author, Build, PipelineRef, PipelineReport


# ---------------------------------------------------------------------------
# Build Tests
# ---------------------------------------------------------------------------


class TestBuild:
    """Tests for the Build schema."""

    def test_parses_api_payload(self) -> None:
        """A full API payload should parse, ignoring fields we don't use."""
        build = Build.model_validate(
            {
                "id": "0190-abc",
                "message": "Add caching\n\nLonger body",
                "state": "passed",
                "blocked": False,
                "author": {"name": "Sam", "email": "sam@example.com"},
                "number": 1234,
                "web_url": "https://buildkite.com/org/api/builds/1234",
                "commit": "deadbeef",
            }
        )
        assert build.state == "passed"
        assert build.author == Author(name="Sam")
        assert build.number == 1234
        assert build.web_url.endswith("/1234")

    def test_optional_fields_default(self) -> None:
        """Every field has a fallback."""
        build = Build.model_validate({"state": "running"})
        assert build.message == ""
        assert build.blocked is False
        assert build.author is None
        assert build.number is None
        assert build.web_url is None

    def test_null_message_and_blocked(self) -> None:
        """Explicit nulls from the API should not fail validation."""
        build = Build.model_validate(
            {"state": "failed", "message": None, "blocked": None, "author": None}
        )
        assert build.message == ""
        assert build.blocked is False

    def test_missing_or_null_state_parses_empty(self) -> None:
        """An odd build on the page must not sink the whole page."""
        assert Build.model_validate({"message": "no state"}).state == ""
        assert Build.model_validate({"state": None}).state == ""

    def test_non_string_state_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Build.model_validate({"state": {"nested": True}})

    def test_build_is_frozen(self) -> None:
        build = Build(state="passed")
        with pytest.raises(ValidationError):
            build.state = "failed"


# ---------------------------------------------------------------------------
# PipelineRef Tests
# ---------------------------------------------------------------------------


class TestPipelineRef:
    """Tests for PipelineRef parsing."""

    def test_mapping_form(self) -> None:
        ref = PipelineRef.model_validate({"pipeline": "serve-api", "branch": "main"})
        assert ref.pipeline == "serve-api"
        assert ref.branch == "main"

    def test_pair_form(self) -> None:
        ref = PipelineRef.model_validate(["mr-yum", "master"])
        assert ref == PipelineRef(pipeline="mr-yum", branch="master")

    def test_pair_wrong_length_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PipelineRef.model_validate(["only-a-pipeline"])

    def test_empty_branch_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PipelineRef(pipeline="serve-api", branch="")


# ---------------------------------------------------------------------------
# PipelineReport Tests
# ---------------------------------------------------------------------------


class TestPipelineReport:
    """Tests for PipelineReport.from_builds."""

    def test_latest_build_drives_link(self) -> None:
        builds = [
            Build(state="running", number=42, web_url="https://x/42"),
            Build(state="passed", number=41, web_url="https://x/41"),
        ]
        report = PipelineReport.from_builds("serve-api", builds)
        assert report.number == 42
        assert report.url == "https://x/42"
        assert report.builds == builds

    def test_no_builds_uses_placeholder(self) -> None:
        report = PipelineReport.from_builds("serve-api", [])
        assert report.number == 0
        assert report.url is None

    def test_latest_without_number_or_url(self) -> None:
        """A newest build missing its number/URL falls back to 0 / None."""
        report = PipelineReport.from_builds("serve-api", [Build(state="failed")])
        assert report.number == 0
        assert report.url is None
