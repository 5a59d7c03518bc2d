"""Pydantic models for the data that flows through the release reporter.

These schemas describe what we get back from Buildkite and what we hand to
the formatting layer:
- Build / Author: one CI run, parsed straight from the API's JSON
- PipelineRef: a (pipeline, branch) pair from the config file
- PipelineReport: the builds fetched for one pipeline in a single run

Key design decisions:
- Models are frozen; nothing downstream of the fetcher mutates a build
- Unknown API fields are ignored so Buildkite can add fields freely
- Optional fields stay optional here; fallbacks live where they are rendered
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Build Schemas
# ---------------------------------------------------------------------------


class Author(BaseModel):
    """Commit author attached to a build."""

    model_config = ConfigDict(frozen=True)

    name: str | None = Field(None, description="Author display name")


class Build(BaseModel):
    """A single CI run as returned by the builds endpoint.

    Attributes:
        message: Commit message (possibly multi-line)
        state: Build state (e.g., "passed", "failed", "running", "blocked")
        blocked: Whether the build is waiting on a block step
        author: Who authored the commit, if known
        number: Build number within the pipeline
        web_url: Link to the build in the Buildkite UI
    """

    model_config = ConfigDict(frozen=True)

    message: str = Field("", description="Commit message")
    state: str = Field("", description="Build state reported by the provider")
    blocked: bool = Field(False, description="Waiting on a manual block step")
    author: Author | None = Field(None, description="Commit author")
    number: int | None = Field(None, description="Build number")
    web_url: str | None = Field(None, description="Build page URL")

    # A build with an odd or missing state simply doesn't need release
    @field_validator("message", "state", mode="before")
    @classmethod
    def coerce_null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("blocked", mode="before")
    @classmethod
    def coerce_null_blocked(cls, value: Any) -> Any:
        return False if value is None else value


# ---------------------------------------------------------------------------
# Pipeline Schemas
# ---------------------------------------------------------------------------


class PipelineRef(BaseModel):
    """A pipeline slug and the branch whose builds we report on.

    Accepts either a mapping (``{pipeline: beamer, branch: main}``) or a
    two-item list (``[beamer, main]``) so config files can use whichever
    reads better.
    """

    model_config = ConfigDict(frozen=True)

    pipeline: str = Field(..., min_length=1, description="Pipeline slug")
    branch: str = Field(..., min_length=1, description="Branch to query")

    @model_validator(mode="before")
    @classmethod
    def accept_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError(
                    f"Pipeline pair must have exactly 2 items, got {len(data)}"
                )
            return {"pipeline": data[0], "branch": data[1]}
        return data


class PipelineReport(BaseModel):
    """Builds fetched for one pipeline, newest first.

    ``number`` and ``url`` describe the latest build and are used for the
    header link. They fall back to 0 / None when there is nothing to link to.
    """

    model_config = ConfigDict(frozen=True)

    pipeline: str
    builds: list[Build] = Field(default_factory=list)
    number: int = 0
    url: str | None = None

    @classmethod
    def from_builds(cls, pipeline: str, builds: list[Build]) -> PipelineReport:
        """Build a report, deriving the header link from the newest build."""
        latest = builds[0] if builds else None
        return cls(
            pipeline=pipeline,
            builds=builds,
            number=(latest.number or 0) if latest else 0,
            url=latest.web_url if latest else None,
        )
