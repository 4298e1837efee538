"""
Time helpers shared across the ETL.

All stored timestamps are naive UTC. Provider timestamps (ISO 8601 with a
trailing Z or an offset) are converted to naive UTC on the way in.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow_naive() -> datetime:
    """Return the current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp such as '2025-05-01T12:30:00Z' into naive UTC.

    Returns None for empty, non-string or unparseable values.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
