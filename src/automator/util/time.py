from __future__ import annotations

from datetime import datetime


def now() -> datetime:
    """Return timezone-aware current local time."""
    return datetime.now().astimezone()


def duration_sec(start: datetime, end: datetime) -> float:
    """Calculate elapsed seconds."""
    return round((end - start).total_seconds(), 3)
