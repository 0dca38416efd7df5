from __future__ import annotations
import logging
from typing import Protocol

from mqtt_replayer.gate import ConnectionGate

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def publish(self, topic: str, payload: str, qos: int = 0, retain: bool = False) -> None: ...


class Publisher:
    """Hands (topic, payload) to the transport once the gate reports a live link."""

    def __init__(self, transport: Transport, gate: ConnectionGate, qos: int = 0, retain: bool = False):
        self._transport = transport
        self._gate = gate
        self.qos = qos
        self.retain = retain

    async def publish(self, topic: str, payload: str) -> None:
        await self._gate.wait_connected()
        logger.debug('Publishing on topic "%s": %s', topic, payload)
        # fire and forget: no broker acknowledgment is awaited
        self._transport.publish(topic, payload, qos=self.qos, retain=self.retain)
