"""
Date parsing and formatting utilities.
"""

import re
from datetime import date, datetime, time, timezone
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from ..core.exceptions import ConfigurationError
from ..core.models import DueDate

RELATIVE_DAYS = {"today": 0, "tomorrow": 1, "yesterday": -1}
IN_PATTERN = re.compile(r"^in\s+(\d+)\s+(minute|hour|day|week|month)s?$")

# Two sentinel defaults with different hours; an hour that follows the
# sentinel was not present in the input.
_DEFAULT_A = datetime(2000, 1, 1, 0, 0, 0)
_DEFAULT_B = datetime(2000, 1, 1, 1, 1, 1)


def _parse_time_of_day(text: str) -> time:
    try:
        parsed = date_parser.parse(text, default=_DEFAULT_A)
    except (ValueError, OverflowError) as e:
        raise ConfigurationError(f"Invalid time '{text}': {e}")
    return parsed.time().replace(second=0, microsecond=0)


def parse_date_argument(text: str, now: Optional[datetime] = None) -> DueDate:
    """
    Parse a user supplied date into a DueDate.

    Handles:
    - today / tomorrow / yesterday, optionally followed by a time
    - in N minutes|hours|days|weeks|months
    - anything dateutil understands (2024-05-01, "May 1 14:30", ...)

    A time of day in the input produces a timed due date, otherwise the
    due date is all-day.

    Raises:
        ConfigurationError: If the text cannot be parsed
    """
    if not text or not text.strip():
        raise ConfigurationError("Date cannot be empty")

    now = now or datetime.now()
    value = " ".join(text.strip().lower().split())

    first, _, rest = value.partition(" ")
    if first in RELATIVE_DAYS:
        day = now.date() + relativedelta(days=RELATIVE_DAYS[first])
        if rest.startswith("at "):
            rest = rest[3:]
        if rest:
            return DueDate(day, _parse_time_of_day(rest))
        return DueDate(day)

    match = IN_PATTERN.match(value)
    if match:
        qty, unit = int(match.group(1)), match.group(2)
        if unit in ("minute", "hour"):
            target = now + relativedelta(**{f"{unit}s": qty})
            return DueDate(target.date(), target.time().replace(second=0, microsecond=0))
        return DueDate(now.date() + relativedelta(**{f"{unit}s": qty}))

    try:
        first_pass = date_parser.parse(text, default=_DEFAULT_A.replace(
            year=now.year, month=now.month, day=now.day))
        second_pass = date_parser.parse(text, default=_DEFAULT_B.replace(
            year=now.year, month=now.month, day=now.day))
    except (ValueError, OverflowError) as e:
        raise ConfigurationError(f"Invalid date '{text}': {e}")

    has_time = first_pass.hour == second_pass.hour
    if has_time:
        return DueDate(first_pass.date(), first_pass.time().replace(second=0, microsecond=0))
    return DueDate(first_pass.date())


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Format an instant as UTC ISO-8601 (2024-01-05T14:00:00Z).

    Naive datetimes are taken to be local time.
    """
    if value is None:
        return None
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def relative_time(target: datetime, now: datetime) -> str:
    """
    Describe ``target`` relative to ``now`` using its largest unit.

    Examples: "in 3 hours", "2 days ago", "in 1 month", "now".
    """
    if target.tzinfo is None:
        target = target.astimezone()
    if now.tzinfo is None:
        now = now.astimezone()

    future = target >= now
    delta = relativedelta(target, now) if future else relativedelta(now, target)

    units = [
        (delta.years, "year"),
        (delta.months, "month"),
        (delta.days // 7, "week"),
        (delta.days, "day"),
        (delta.hours, "hour"),
        (delta.minutes, "minute"),
        (delta.seconds, "second"),
    ]
    for count, unit in units:
        if count:
            label = _plural(count, unit)
            return f"in {label}" if future else f"{label} ago"
    return "now"


def relative_day(day: date, today: date) -> str:
    """Describe a calendar day relative to today ("tomorrow", "in 3 days")."""
    diff = (day - today).days
    if diff == 0:
        return "today"
    if diff == 1:
        return "tomorrow"
    if diff == -1:
        return "yesterday"
    if diff > 0:
        return f"in {diff} days"
    return f"{-diff} days ago"
