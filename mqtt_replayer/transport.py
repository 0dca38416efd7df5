from __future__ import annotations
import asyncio
import logging
import ssl
from dataclasses import dataclass
from urllib.parse import urlsplit

import paho.mqtt.client as mqtt

from mqtt_replayer.gate import ConnectionGate
from mqtt_replayer.settings import Settings

logger = logging.getLogger(__name__)

# scheme -> (default port, tls, paho transport)
SCHEMES = {
    "mqtt": (1883, False, "tcp"),
    "tcp": (1883, False, "tcp"),
    "mqtts": (8883, True, "tcp"),
    "ssl": (8883, True, "tcp"),
    "ws": (80, False, "websockets"),
    "wss": (443, True, "websockets"),
}


@dataclass(frozen=True)
class BrokerAddress:
    scheme: str
    host: str
    port: int
    tls: bool
    transport: str
    path: str = "/"

    def __str__(self):
        return f"{self.scheme}://{self.host}:{self.port}"


def parse_broker_uri(uri: str) -> BrokerAddress:
    """
    Accepts "host:port", "host" or "<scheme>://host[:port][/path]".
    Raises ValueError for anything else.
    """
    uri = (uri or "").strip()
    if not uri:
        raise ValueError("empty broker address")
    if "://" not in uri:
        uri = "mqtt://" + uri
    parts = urlsplit(uri)
    scheme = parts.scheme.lower()
    if scheme not in SCHEMES:
        raise ValueError(f"unsupported broker scheme '{scheme}'")
    try:
        port = parts.port
    except ValueError as e:
        raise ValueError(f"invalid broker port in '{uri}'") from e
    if not parts.hostname:
        raise ValueError(f"missing broker host in '{uri}'")
    default_port, tls, transport = SCHEMES[scheme]
    return BrokerAddress(
        scheme=scheme,
        host=parts.hostname,
        port=port or default_port,
        tls=tls,
        transport=transport,
        path=parts.path or "/",
    )


def make_client(broker: BrokerAddress, client_id: str) -> mqtt.Client:
    client = mqtt.Client(
        mqtt.CallbackAPIVersion.VERSION2,
        client_id=client_id,
        protocol=mqtt.MQTTv311,
        transport=broker.transport,
    )
    if broker.transport == "websockets":
        client.ws_set_options(path=broker.path)
    if broker.tls:
        client.tls_set(cert_reqs=ssl.CERT_REQUIRED)
        client.tls_insecure_set(False)
    return client


class MqttTransport:
    """
    paho-mqtt client wired to a ConnectionGate.

    paho runs its network loop on a background thread and retries the
    connection on its own; every lifecycle callback is forwarded to the
    event loop so the gate is only touched from the replay thread.
    """

    def __init__(self, broker: BrokerAddress, gate: ConnectionGate, settings: Settings,
                 loop: asyncio.AbstractEventLoop = None, client: mqtt.Client = None):
        self.broker = broker
        self._gate = gate
        self._settings = settings
        self._loop = loop or asyncio.get_running_loop()
        self._closing = False

        self._client = client or make_client(broker, settings.client_id)
        if settings.username:
            self._client.username_pw_set(settings.username, settings.password)
        self._client.reconnect_delay_set(
            min_delay=max(1, round(settings.reconnect_period)),
            max_delay=max(1, round(settings.reconnect_max_period)),
        )
        self._client.connect_timeout = settings.connect_timeout

        self._client.on_connect = self._on_connect
        self._client.on_connect_fail = self._on_connect_fail
        self._client.on_pre_connect = self._on_pre_connect
        self._client.on_disconnect = self._on_disconnect

    # --- lifecycle ---

    def start(self) -> None:
        """Begin connecting in the background; does not wait for the broker."""
        logger.info("Connecting to MQTT broker at %s", self.broker)
        self._client.connect_async(self.broker.host, self.broker.port, keepalive=self._settings.keepalive)
        self._client.loop_start()

    def close(self) -> None:
        self._closing = True
        self._client.disconnect()
        self._client.loop_stop()
        self._gate.set_connected(False)

    def publish(self, topic: str, payload: str, qos: int = 0, retain: bool = False) -> None:
        try:
            info = self._client.publish(topic, payload, qos=qos, retain=retain)
        except ValueError as e:
            # paho refuses wildcard, empty and oversize topics; skip this one event
            logger.warning('Publish on topic "%s" not sent: %s', topic, e)
            return
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            logger.warning('Publish on topic "%s" not sent: %s', topic, mqtt.error_string(info.rc))

    # --- paho callbacks (network thread) ---

    def _set_connected(self, connected: bool) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._gate.set_connected, connected)

    def _on_connect(self, client, userdata, flags, reason_code, properties):
        if reason_code.is_failure:
            logger.error("Error: connection refused by %s: %s", self.broker, reason_code)
            return
        logger.info("Successfully connected to MQTT broker at %s", self.broker)
        self._set_connected(True)

    def _on_connect_fail(self, client, userdata):
        logger.error("Error: could not reach MQTT broker at %s", self.broker)

    def _on_pre_connect(self, client, userdata):
        logger.debug("Client trying to reconnect...")

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties):
        self._set_connected(False)
        if self._closing:
            logger.info("Client ended")
        else:
            logger.warning("Client went offline! (%s)", reason_code)
