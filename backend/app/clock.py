"""Time source for voting-window checks and commit timestamps."""
from datetime import datetime
from typing import Callable, Optional

import pytz

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


def as_utc(ts: Optional[datetime]) -> Optional[datetime]:
    """Normalize a stored timestamp to aware UTC.

    SQLite hands back naive datetimes even for timezone-aware columns; those
    are stored as UTC, so they are localized rather than converted.
    """
    if ts is None:
        return None
    if ts.tzinfo is None:
        return pytz.utc.localize(ts)
    return ts.astimezone(pytz.utc)


def get_clock() -> Clock:
    """FastAPI dependency: overridden in tests with a fixed clock."""
    return utc_now
