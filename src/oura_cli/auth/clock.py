"""Clock capability used for token expiry decisions."""
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current aware UTC time."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
