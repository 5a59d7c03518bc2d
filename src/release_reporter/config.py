"""Configuration for the release reporter.

Everything that varies between environments lives in a YAML file rather than
in code: which pipelines to report on, where the API lives, how builds are
selected and what to do when a fetch fails. The API token is the one
exception; it comes from the environment (optionally via a .env file) so it
never ends up in a committed config.

Example config (pipelines.yaml):

    api_url: https://api.buildkite.com/v2/organizations/mryum/pipelines
    selection: prefix
    failure_policy: partial
    pipelines:
      - {pipeline: beamer, branch: main}
      - [mr-yum, master]
    release_notice:
      enabled: true
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from release_reporter.schemas import PipelineRef
from release_reporter.selection import SelectionMode

TOKEN_ENV_VAR = "BUILDKITE_API_TOKEN"
CONFIG_ENV_VAR = "RELEASE_REPORTER_CONFIG"
DEFAULT_CONFIG_PATH = "pipelines.yaml"
DEFAULT_API_URL = "https://api.buildkite.com/v2/organizations/mryum/pipelines"


class MissingCredentialError(ValueError):
    """Raised at startup when no API token is available."""


# ---------------------------------------------------------------------------
# Config Types
# ---------------------------------------------------------------------------


class FailurePolicy(StrEnum):
    """How the orchestrator treats a pipeline whose fetch failed.

    PARTIAL: Log it and report the pipeline as having no builds
    STRICT: Abort the whole run with the fetch error
    """

    PARTIAL = "partial"
    STRICT = "strict"


class ReleaseNoticeConfig(BaseModel):
    """Settings for the optional "releasing soon" line."""

    enabled: bool = False
    minutes_ahead: int = Field(30, ge=0)
    round_to_minutes: int = Field(15, gt=0)
    timezone_label: str = "AEST/AEDT"


class ReporterConfig(BaseModel):
    """Top-level configuration loaded from YAML."""

    api_url: str = DEFAULT_API_URL
    per_page: int = Field(20, gt=0)
    selection: SelectionMode = SelectionMode.PREFIX
    failure_policy: FailurePolicy = FailurePolicy.PARTIAL
    pipelines: list[PipelineRef] = Field(default_factory=list)
    release_notice: ReleaseNoticeConfig = Field(default_factory=ReleaseNoticeConfig)


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


def load_reporter_config(path: str | Path) -> ReporterConfig:
    """Load and validate a YAML reporter config file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A validated ReporterConfig. Returns defaults if the file doesn't exist.

    Raises:
        ValueError: If the YAML content is invalid or fails validation.
    """
    config_path = Path(path)
    if not config_path.exists():
        return ReporterConfig()

    try:
        raw = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    try:
        return ReporterConfig.model_validate(raw)
    except Exception as exc:
        raise ValueError(f"Invalid reporter config in {path}: {exc}") from exc


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Pick the config file: explicit path, then env var, then the default."""
    return Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)


def resolve_api_token(environ: Mapping[str, str] | None = None) -> str:
    """Read the Buildkite API token from the environment.

    Raises:
        MissingCredentialError: If the variable is unset or blank.
    """
    env = os.environ if environ is None else environ
    token = (env.get(TOKEN_ENV_VAR) or "").strip()
    if not token:
        raise MissingCredentialError(
            f"Missing {TOKEN_ENV_VAR}; set it in the environment or a .env file"
        )
    return token
