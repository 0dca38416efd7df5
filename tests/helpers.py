class FakeTransport:
    """Records publishes; "connects" as soon as it is started unless told otherwise."""

    instances = []

    def __init__(self, broker=None, gate=None, settings=None, loop=None, connect_on_start=True):
        self.broker = broker
        self.gate = gate
        self.settings = settings
        self.connect_on_start = connect_on_start
        self.published = []
        self.started = False
        self.closed = False
        FakeTransport.instances.append(self)

    def start(self):
        self.started = True
        if self.connect_on_start and self.gate is not None:
            self.gate.set_connected(True)

    def close(self):
        self.closed = True

    def publish(self, topic, payload, qos=0, retain=False):
        self.published.append((topic, payload, qos, retain))


def log_line(time, topic, payload, date="2020-01-01"):
    return f"{date} {time} verb MQTT Message received with topic '{topic}' and data: {payload}"
