from __future__ import annotations
import asyncio
import logging

from mqtt_replayer.settings import DEFAULT_WAIT_FOR_MQTT

logger = logging.getLogger(__name__)


class ConnectionGate:
    """
    Tracks whether the broker link is usable for publishing.

    The transport's lifecycle callbacks flip the flag with set_connected();
    publishers park in wait_connected() until it is True. Both must run on
    the event loop thread: callbacks coming from another thread go through
    loop.call_soon_threadsafe().

    Waiting is a poll on a fixed interval that also wakes early when a
    connect is signalled. There is no timeout: if the broker never comes
    back, the replay waits forever rather than dropping events.
    """

    def __init__(self, poll_interval: float = DEFAULT_WAIT_FOR_MQTT):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.poll_interval = poll_interval
        self._connected = False
        self._ready = asyncio.Event()

    def is_connected(self) -> bool:
        return self._connected

    def set_connected(self, connected: bool) -> None:
        self._connected = connected
        if connected:
            self._ready.set()
        else:
            self._ready.clear()

    async def wait_connected(self) -> None:
        while not self._connected:
            try:
                await asyncio.wait_for(self._ready.wait(), timeout=self.poll_interval)
            except asyncio.TimeoutError:
                logger.debug("Waiting for MQTT connection established...")
