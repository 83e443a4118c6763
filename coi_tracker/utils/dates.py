# COMPONENT: DATE HELPERS
# REQUIREMENTS SATISFIED: day-granularity expiry math, human-formatted dates
"""
coi_tracker/utils/dates.py

Day-granularity date helpers shared by the query engine, the statistics
and the CSV export. None of these functions raise on malformed input:
parsing returns None, formatting returns the original string and the
day-difference falls back to 0.
"""
from datetime import date, datetime, timezone
from typing import Optional

HUMAN_DATE_FORMAT = "%b %d, %Y"


def parse_iso_date(value) -> Optional[date]:
    """Parse "YYYY-MM-DD" (or a full ISO timestamp) to a date; None if invalid."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip().split("T", 1)[0]
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_iso_timestamp(value) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_date(value: str) -> str:
    """Format an ISO date as "Nov 17, 2026"; the input is returned unchanged if unparseable."""
    parsed = parse_iso_date(value)
    if parsed is None:
        return value
    return parsed.strftime(HUMAN_DATE_FORMAT)


def format_timestamp(value: str) -> str:
    parsed = parse_iso_timestamp(value)
    if parsed is None:
        return value
    return parsed.strftime(HUMAN_DATE_FORMAT)


def days_until_expiry(expiry_date: str, today: Optional[date] = None) -> int:
    expiry = parse_iso_date(expiry_date)
    if expiry is None:
        return 0
    return (expiry - (today or date.today())).days


def utc_now_iso() -> str:
    """Current UTC time as "2025-06-01T12:00:00.000Z"."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
