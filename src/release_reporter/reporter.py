"""Core orchestrator for the release report.

This module ties together all the components:
- Build fetching (context/buildkite.py)
- Release candidate selection (selection.py)
- Markdown assembly (report.py, notes.py)
- Date and release time estimates (timing.py)

The reporter follows this flow:
1. Fetch builds for every configured pipeline concurrently
2. Join the results, applying the failure policy to any failed fetch
3. Assemble the markdown list of builds waiting on a release
4. Print the heading, the list and (optionally) the release notice

This is the main entry point, whether called from the CLI or a scheduled job.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from datetime import date, datetime

from dotenv import load_dotenv

from release_reporter.config import (
    FailurePolicy,
    ReporterConfig,
    load_reporter_config,
    resolve_api_token,
    resolve_config_path,
)
from release_reporter.context.buildkite import (
    BuildkiteClient,
    BuildkiteClientProtocol,
    FetchError,
)
from release_reporter.logging_config import get_logger, setup_logging
from release_reporter.report import assemble_report
from release_reporter.schemas import PipelineRef, PipelineReport
from release_reporter.timing import next_rounded_time, release_date

logger = get_logger(__name__)


class ReleaseReporter:
    """Orchestrates the fetch -> select -> format pipeline.

    Stateless between runs; each call to run() fetches everything afresh.

    Usage:
        reporter = ReleaseReporter(BuildkiteClient(token), config)
        await reporter.run()
    """

    def __init__(
        self,
        client: BuildkiteClientProtocol,
        config: ReporterConfig | None = None,
    ) -> None:
        """Initialize the reporter with its dependencies.

        Args:
            client: Build fetcher (real or mock)
            config: Reporter configuration. Uses defaults if None.
        """
        self.client = client
        self.config = config or ReporterConfig()

    async def collect(self, pipelines: Sequence[PipelineRef]) -> list[PipelineReport]:
        """Fetch all pipelines concurrently and join the results.

        Every fetch runs to completion before failures are looked at, so a
        slow or broken pipeline never cuts the others short.

        Args:
            pipelines: Pipelines to fetch, in report order

        Returns:
            One PipelineReport per pipeline, in the same order

        Raises:
            FetchError: Under the strict failure policy, the first failure
                        in pipeline order
        """
        results = await asyncio.gather(
            *(self.client.fetch_builds(ref.pipeline, ref.branch) for ref in pipelines),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, FetchError)]
        if failures and self.config.failure_policy == FailurePolicy.STRICT:
            raise failures[0]

        reports = []
        for ref, result in zip(pipelines, results):
            if isinstance(result, FetchError):
                logger.warning(
                    "fetch_failed",
                    pipeline=ref.pipeline,
                    branch=ref.branch,
                    reason=result.reason,
                )
                builds = []
            elif isinstance(result, BaseException):
                raise result
            else:
                builds = result
            reports.append(PipelineReport.from_builds(ref.pipeline, builds))
        return reports

    def render(
        self,
        reports: Sequence[PipelineReport],
        today: date | None = None,
        now: datetime | None = None,
    ) -> str:
        """Render the full report text.

        Args:
            reports: Per-pipeline results from collect()
            today: Date for the heading. Defaults to today.
            now: Reference time for the release notice. Defaults to now.

        Returns:
            Heading, blank line, markdown list, and the notice if enabled
        """
        lines = [f"### Releases for {release_date(today)}", ""]
        lines.append(assemble_report(reports, self.config.selection))

        notice = self.config.release_notice
        if notice.enabled:
            at = next_rounded_time(
                notice.minutes_ahead,
                notice.round_to_minutes,
                now=now,
                timezone_label=notice.timezone_label,
            )
            lines.append(
                f"Will :big-red-button: in approx. {notice.minutes_ahead}mins "
                f"at {at} if no objections."
            )
        return "\n".join(lines)

    async def run(self, pipelines: Sequence[PipelineRef] | None = None) -> str:
        """Fetch, render and print the report.

        Args:
            pipelines: Pipelines to report on. Defaults to the configured list.

        Returns:
            The text that was written to stdout
        """
        pipelines = self.config.pipelines if pipelines is None else pipelines
        if not pipelines:
            logger.warning("no_pipelines_configured")

        reports = await self.collect(pipelines)
        text = self.render(reports)
        print(text)

        logger.info(
            "report_rendered",
            pipelines_count=len(reports),
            failure_policy=self.config.failure_policy.value,
            selection=self.config.selection.value,
        )
        return text


# ---------------------------------------------------------------------------
# CLI Entry Point
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point.

    Usage:
        release-reporter
        release-reporter --config pipelines.yaml --notice

    Reads BUILDKITE_API_TOKEN from the environment or a .env file and exits
    with status 1 before touching the network if it is missing.
    """
    parser = argparse.ArgumentParser(description="Pending release report")
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to YAML config (defaults to $RELEASE_REPORTER_CONFIG or pipelines.yaml)",
    )
    parser.add_argument(
        "--notice",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Append the estimated release time notice",
    )
    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging()

    config_path = resolve_config_path(args.config)
    if not config_path.exists():
        logger.warning("config_missing", path=str(config_path))
    try:
        config = load_reporter_config(config_path)
        client = BuildkiteClient(
            token=resolve_api_token(),
            api_url=config.api_url,
            per_page=config.per_page,
        )
    except ValueError as e:  # includes MissingCredentialError
        logger.error("startup_failed", error=str(e))
        sys.exit(1)

    if args.notice is not None:
        config = config.model_copy(
            update={
                "release_notice": config.release_notice.model_copy(
                    update={"enabled": args.notice}
                )
            }
        )

    reporter = ReleaseReporter(client, config)
    try:
        asyncio.run(reporter.run())
    except FetchError as e:
        logger.error(
            "report_aborted",
            pipeline=e.pipeline,
            branch=e.branch,
            reason=e.reason,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
