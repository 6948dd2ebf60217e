"""
Wall clock for the form header and for save-time stamps.

The clock is cosmetic: recorded_at is display text and never feeds
ordering or identity.
"""

import time
from datetime import datetime
from typing import Callable, Optional


def format_timestamp(dt: datetime) -> str:
    """Render as D/M/YYYY, HH:MM:SS (e.g. 19/10/2026, 14:03:05)."""
    return f"{dt.day}/{dt.month}/{dt.year}, {dt:%H:%M:%S}"


class Clock:
    """Ticking display plus the stamp used when a survey is saved."""

    def __init__(self, now: Callable[[], datetime] = datetime.now):
        self._now = now
        self.display = format_timestamp(self._now())

    def timestamp(self) -> str:
        return format_timestamp(self._now())

    def tick(self) -> str:
        self.display = self.timestamp()
        return self.display

    def run(
        self,
        on_tick: Callable[[str], None],
        ticks: Optional[int] = None,
        interval: float = 1.0,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        """
        Refresh the display once per interval and hand it to on_tick.

        Runs forever when ticks is None.
        """
        sleep = sleep or time.sleep
        count = 0
        while ticks is None or count < ticks:
            on_tick(self.tick())
            count += 1
            if ticks is None or count < ticks:
                sleep(interval)
