from __future__ import annotations
import re
from datetime import date, datetime, time
from typing import Iterable, Iterator, Optional

from mqtt_replayer.models import LogEvent

MARKER = "verb MQTT Message received with topic"

# date, time, topic, payload
LINE_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2}) (\d{2}:\d{2}:\d{2}\.\d{3}) "
    + re.escape(MARKER)
    + r" '(.*)' and data: (.*)"
)
GROUPS = 4

# Only the time of day drives the replay; every timestamp is pinned to this day.
PLACEHOLDER_DATE = date(2000, 1, 1)


def parse_line(line: str) -> Optional[LogEvent]:
    """
    Turn one log line into a LogEvent, or None if the line is not a
    "message received" entry. The entry must start the line; a
    near-match (including text before the date) is a miss.
    """
    m = LINE_RE.fullmatch(line.rstrip("\r"))
    if m is None:
        return None
    groups = [g for g in m.groups() if g]
    if len(groups) != GROUPS:
        return None
    event = LogEvent(*groups)
    try:
        event.time_of_day()
    except ValueError:
        # e.g. 25:61:00.000 matches the pattern but is not a time
        return None
    return event


def iter_events(lines: Iterable[str]) -> Iterator[LogEvent]:
    for line in lines:
        event = parse_line(line)
        if event is not None:
            yield event


def wait_seconds(previous: time, current: time) -> float:
    """
    Seconds to wait between two events, from their time of day only.

    Out-of-order entries (and a log that runs past midnight) give a
    negative delta, which is clamped to 0 so the event fires at once.
    """
    delta = datetime.combine(PLACEHOLDER_DATE, current) - datetime.combine(PLACEHOLDER_DATE, previous)
    return max(delta.total_seconds(), 0.0)
