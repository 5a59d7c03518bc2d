"""Pending Release Reporter.

Queries Buildkite for a configured set of pipelines, works out which builds
are still waiting on a manual release, and prints a markdown summary ready
to paste into the release channel.
"""

__version__ = "0.1.0"
