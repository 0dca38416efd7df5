import asyncio

from mqtt_replayer.gate import ConnectionGate
from mqtt_replayer.publisher import Publisher
from tests.helpers import FakeTransport


def test_publish_when_connected():
    transport = FakeTransport()
    gate = ConnectionGate()
    gate.set_connected(True)

    asyncio.run(Publisher(transport, gate, qos=1, retain=True).publish("a/b", '{"x":1}'))

    assert transport.published == [("a/b", '{"x":1}', 1, True)]


def test_publish_waits_for_gate():
    async def scenario():
        transport = FakeTransport()
        gate = ConnectionGate(poll_interval=0.01)
        task = asyncio.create_task(Publisher(transport, gate).publish("t", "p"))
        await asyncio.sleep(0.05)
        before = list(transport.published)
        gate.set_connected(True)
        await asyncio.wait_for(task, timeout=1)
        return before, transport.published

    before, after = asyncio.run(scenario())

    assert before == []
    assert after == [("t", "p", 0, False)]
