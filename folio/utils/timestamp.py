"""Timestamp and calendar date utilities."""

import re
from datetime import date, datetime, timezone
from typing import Optional

# Plain calendar date, interpreted without any time-zone shift
CALENDAR_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def now_exact() -> str:
    """Current UTC instant as an ISO 8601 string (millisecond precision)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def parse_post_date(value: str) -> Optional[date]:
    """
    Resolve a front-matter date string to a calendar date.

    Policy:
    - "YYYY-MM-DD" is that calendar date, no time-zone shift.
    - Anything else is parsed as ISO 8601 ("Z" suffix accepted). Aware values
      are converted to UTC before taking the date; naive values keep their
      own date part.

    Args:
        value: Date string from a metadata block

    Returns:
        The resolved date, or None if the string cannot be parsed

    Examples:
        parse_post_date("2024-05-01")
        # date(2024, 5, 1)

        parse_post_date("2024-05-01T23:30:00-05:00")
        # date(2024, 5, 2)
    """
    if not value:
        return None

    value = value.strip()
    match = CALENDAR_DATE_PATTERN.match(value)
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def format_post_date(value: date, relative: bool = False) -> str:
    """
    Format a post date for display.

    Args:
        value: Post date
        relative: If True, show compact relative age (e.g., "3d ago")

    Returns:
        "YYYY-MM-DD" or a compact relative string
    """
    if not relative:
        return value.isoformat()

    days = (today() - value).days
    if days < 0:
        return f"{-days}d from now"
    if days == 0:
        return "today"
    if days < 365:
        return f"{days}d ago"
    return f"{days // 365}y ago"
