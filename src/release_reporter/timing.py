"""Date and time helpers for the report heading and the release notice."""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta

# Spelled out so the heading doesn't depend on the process locale.
WEEKDAYS = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def round_minutes_to_nearest(minutes: int, base: int) -> int:
    """Round ``minutes`` to the nearest multiple of ``base``, halves going up.

    The result may be 60 (or more); callers roll it into the hour.
    """
    if base <= 0:
        raise ValueError(f"Rounding base must be positive, got {base}")
    return math.floor(minutes / base + 0.5) * base


def next_rounded_time(
    minutes_ahead: int,
    round_to_minutes: int,
    now: datetime | None = None,
    timezone_label: str = "AEST/AEDT",
) -> str:
    """Estimate a release time ``minutes_ahead`` from now, rounded for humans.

    Args:
        minutes_ahead: How far in the future the release should happen
        round_to_minutes: Granularity of the displayed time (e.g., 15)
        now: Reference time. Defaults to the local current time.
        timezone_label: Static label appended to the time. No zone
                        conversion is done; the label describes local time.

    Returns:
        A string like "10:45 AEST/AEDT"
    """
    target = (now or datetime.now()) + timedelta(minutes=minutes_ahead)
    rounded = round_minutes_to_nearest(target.minute, round_to_minutes)
    target = target.replace(minute=0, second=0, microsecond=0) + timedelta(
        minutes=rounded
    )
    return f"{target.hour}:{target.minute:02d} {timezone_label}"


def release_date(today: date | None = None) -> str:
    """Format a date like "Saturday, October 17, 2026"."""
    today = today or date.today()
    return (
        f"{WEEKDAYS[today.weekday()]}, {MONTHS[today.month - 1]} "
        f"{today.day}, {today.year}"
    )
