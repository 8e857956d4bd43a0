"""
Shared utility functions for the Microsoft Band cloud client.

Timestamp and duration conversions used by the record types.
"""

import re
from datetime import datetime, timezone

_FRACTION_RE = re.compile(r"\.(\d+)")
_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)


def parse_timestamp(value: str) -> datetime:
    """Parse an API timestamp into an aware datetime.

    The API emits .NET style ISO 8601 strings with up to 7 fractional
    digits (e.g. "2015-10-27T04:27:33.7720000+00:00") or a trailing "Z".
    Fractions are truncated to microseconds; naive values are taken as UTC.

    Args:
        value: ISO 8601 timestamp string

    Returns:
        Timezone-aware datetime, or None for empty input

    Raises:
        ValueError: If the string is not an ISO 8601 timestamp
    """
    if not value:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp {value!r}")
    s = value.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    s = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), s, count=1)
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(dt: datetime) -> str:
    """Format a datetime for use in query parameters (UTC, "Z" suffix)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_duration(value: str) -> int:
    """Convert an ISO 8601 duration to whole seconds.

    Args:
        value: Duration like "PT1H2M3S" or "P1DT30M"

    Returns:
        Seconds as int, or None for empty input

    Raises:
        ValueError: If the string is not an ISO 8601 duration
    """
    if not value:
        return None
    m = _DURATION_RE.match(value.strip())
    if not m or value.strip() in ("P", "PT"):
        raise ValueError(f"Invalid duration {value!r}")
    days = int(m.group("days") or 0)
    hours = int(m.group("hours") or 0)
    minutes = int(m.group("minutes") or 0)
    seconds = float(m.group("seconds") or 0)
    return int(days * 86400 + hours * 3600 + minutes * 60 + seconds)
