"""Timezone-aware time helpers."""
from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_iso8601(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as returned by the GitHub API.

    Accepts a trailing ``Z``. Naive values are assumed to be UTC so they can be
    compared with aware datetimes.

    Raises:
        ValueError: If ``value`` is not a valid timestamp.
    """
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_iso8601(value: datetime) -> str:
    """Format as UTC ISO 8601 with a ``Z`` suffix (GitHub style)."""
    return value.astimezone(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


__all__ = ["utc_now", "parse_iso8601", "format_iso8601"]
