"""infrastructure.clock - Wall-clock implementation of the Clock port."""

from __future__ import annotations

from datetime import datetime


class SystemClock:
    """Current local time, timezone-aware.

    "Today" for date defaults and the future-date check is the user's
    calendar day, not the UTC one.
    """

    def now(self) -> datetime:
        return datetime.now().astimezone()
