"""
Timestamp helpers shared by request parsing and result projection.
"""

from datetime import datetime, timezone
from typing import Any, Optional

EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse ISO-8601 strings with Z or offset suffixes; None when unparsable."""
    if not isinstance(value, str):
        return None
    candidate = value.strip()
    if not candidate:
        return None
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"

    if "T" not in candidate and " " in candidate:
        candidate = candidate.replace(" ", "T", 1)

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_iso(value: datetime) -> str:
    """Format a datetime as ISO-8601 with an explicit offset."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
