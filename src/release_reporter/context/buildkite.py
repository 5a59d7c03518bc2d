"""Buildkite API client for fetching recent builds.

This module fetches the latest page of builds for a pipeline, filtered to a
single branch, from Buildkite's REST API.

Design notes:
- Uses httpx for async HTTP requests, one request per pipeline
- The API token is passed in at construction; a client that exists is a
  client that can authenticate
- Errors are raised as FetchError; deciding whether one failed pipeline
  sinks the whole report is the orchestrator's job, not the client's
- Uses a Protocol so the reporter doesn't depend on the concrete
  implementation (makes testing with mocks easy)

Buildkite API docs: https://buildkite.com/docs/apis/rest-api/builds
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from release_reporter.config import DEFAULT_API_URL, MissingCredentialError
from release_reporter.logging_config import get_logger
from release_reporter.schemas import Build

logger = get_logger(__name__)

_BUILDS_ADAPTER = TypeAdapter(list[Build])


class FetchError(RuntimeError):
    """Raised when builds for a pipeline could not be fetched."""

    def __init__(self, pipeline: str, branch: str, reason: str) -> None:
        super().__init__(f"Failed to fetch builds for {pipeline}@{branch}: {reason}")
        self.pipeline = pipeline
        self.branch = branch
        self.reason = reason


# ---------------------------------------------------------------------------
# Protocol (Interface)
# ---------------------------------------------------------------------------


class BuildkiteClientProtocol(Protocol):
    """Protocol defining the interface for build fetching.

    By coding against this protocol (not the concrete class), the reporter
    and tests can use mock implementations without touching real Buildkite.
    """

    async def fetch_builds(self, pipeline: str, branch: str) -> list[Build]:
        """Fetch the most recent builds for a pipeline branch, newest first.

        Args:
            pipeline: Pipeline slug (e.g., "serve-api")
            branch: Branch name (e.g., "main")

        Returns:
            Builds from the first page of results
        """
        ...


# ---------------------------------------------------------------------------
# Concrete Implementation
# ---------------------------------------------------------------------------


class BuildkiteClient:
    """Real Buildkite API client using httpx.

    Usage:
        client = BuildkiteClient(token="bkua_...")
        builds = await client.fetch_builds("serve-api", "main")
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        per_page: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Buildkite client.

        Args:
            token: Buildkite API access token
            api_url: Pipelines collection URL for the organization
            per_page: Page size for the single page we request
            transport: Optional httpx transport (used by tests)

        Raises:
            MissingCredentialError: If the token is empty
        """
        if not token or not token.strip():
            raise MissingCredentialError("Buildkite API token must not be empty")

        self._api_url = api_url.rstrip("/")
        self._per_page = per_page
        self._transport = transport
        self._headers: dict[str, str] = {
            "Authorization": f"Bearer {token.strip()}",
            "Accept": "application/json",
        }

    async def fetch_builds(self, pipeline: str, branch: str) -> list[Build]:
        """Fetch the first page of builds for a pipeline branch.

        Makes a single call:
        GET {api_url}/{pipeline}/builds?branch={branch}&page=1&per_page={n}

        Args:
            pipeline: Pipeline slug
            branch: Branch name

        Returns:
            Builds as returned by Buildkite (newest first)

        Raises:
            FetchError: On a non-2xx status, a transport failure, or a
                        response body that isn't a list of builds
        """
        logger.debug("fetch_started", pipeline=pipeline, branch=branch)

        async with httpx.AsyncClient(
            headers=self._headers,
            transport=self._transport,
        ) as client:
            try:
                resp = await client.get(
                    f"{self._api_url}/{pipeline}/builds",
                    params={"branch": branch, "page": 1, "per_page": self._per_page},
                )
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise FetchError(
                    pipeline, branch, f"HTTP {exc.response.status_code}"
                ) from exc
            except httpx.HTTPError as exc:
                raise FetchError(pipeline, branch, str(exc) or type(exc).__name__) from exc

        try:
            builds = _BUILDS_ADAPTER.validate_json(resp.content)
        except ValidationError as exc:
            raise FetchError(pipeline, branch, f"unexpected response body: {exc}") from exc

        logger.info(
            "fetch_complete",
            pipeline=pipeline,
            branch=branch,
            builds_count=len(builds),
        )
        return builds


# ---------------------------------------------------------------------------
# Mock Implementation (for testing)
# ---------------------------------------------------------------------------


class MockBuildkiteClient:
    """Mock Buildkite client that returns predefined builds.

    Use this in tests and local development when you don't want to hit
    the real Buildkite API.

    Usage:
        client = MockBuildkiteClient(
            builds_by_pipeline={"serve-api": [{"state": "failed", ...}]},
            failures=["flaky-pipeline"],
        )
    """

    def __init__(
        self,
        builds_by_pipeline: Mapping[str, list[dict | Build]] | None = None,
        failures: Iterable[str] = (),
    ) -> None:
        """Initialize with optional predefined data.

        Args:
            builds_by_pipeline: Pipeline slug -> builds (dicts or Build objects)
            failures: Pipeline slugs whose fetch should raise FetchError
        """
        self._builds = dict(builds_by_pipeline or {})
        self._failures = set(failures)
        self.calls: list[tuple[str, str]] = []

    async def fetch_builds(self, pipeline: str, branch: str) -> list[Build]:
        """Return mock builds, or raise for pipelines marked as failing.

        Unknown pipelines have no builds.
        """
        self.calls.append((pipeline, branch))
        if pipeline in self._failures:
            raise FetchError(pipeline, branch, "HTTP 500")
        return [
            b if isinstance(b, Build) else Build.model_validate(b)
            for b in self._builds.get(pipeline, [])
        ]
