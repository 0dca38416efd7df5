from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, time

TIME_FORMAT = "%H:%M:%S.%f"


@dataclass(frozen=True)
class LogEvent:
    """
    One "message received" entry recovered from a device log.
    """
    date: str       # YYYY-MM-DD, not used for timing
    time: str       # HH:MM:SS.mmm
    topic: str
    payload: str    # raw body, published as-is

    def time_of_day(self) -> time:
        return datetime.strptime(self.time, TIME_FORMAT).time()
