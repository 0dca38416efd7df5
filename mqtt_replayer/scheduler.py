from __future__ import annotations
import asyncio
import enum
import logging
from datetime import time
from typing import Awaitable, Callable, Iterable, Optional

from mqtt_replayer.parser import iter_events, wait_seconds
from mqtt_replayer.publisher import Publisher

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class ReplayState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class ReplayScheduler:
    """
    Walks log lines in order and republishes every matching event, keeping
    the gap between consecutive events.

      - lines that do not parse are skipped with no delay
      - the first event goes out immediately
      - each later event waits (current - previous) time of day, divided by
        the speed factor; a negative gap fires at once
      - previous_time only moves after the publish step has returned

    Events are strictly serialized: the next line is not looked at until the
    current publish (including any wait for the broker) has finished.
    One scheduler covers one pass over the lines.
    """

    def __init__(self, publisher: Publisher, speed: float = 1.0, sleep: Sleep = asyncio.sleep):
        if speed <= 0:
            raise ValueError("speed must be positive")
        self._publisher = publisher
        self._speed = speed
        self._sleep = sleep
        self.state = ReplayState.IDLE
        self.previous_time: Optional[time] = None
        self.published = 0

    async def run(self, lines: Iterable[str]) -> int:
        if self.state is not ReplayState.IDLE:
            raise RuntimeError(f"scheduler already {self.state.value}")
        self.state = ReplayState.RUNNING

        for event in iter_events(lines):
            current = event.time_of_day()
            if self.previous_time is not None:
                wait = wait_seconds(self.previous_time, current) / self._speed
                if wait > 0:
                    await self._sleep(wait)

            await self._publisher.publish(event.topic, event.payload)
            self.previous_time = current
            self.published += 1

        self.state = ReplayState.COMPLETED
        logger.info("Processing completed (%d events published)", self.published)
        return self.published
