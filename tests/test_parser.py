from datetime import time

import pytest

from mqtt_replayer.models import LogEvent
from mqtt_replayer.parser import iter_events, parse_line, wait_seconds
from tests.helpers import log_line


def test_parse_line_valid():
    line = log_line("10:00:00.000", "a/b", '{"x":1}')

    event = parse_line(line)

    assert event == LogEvent("2020-01-01", "10:00:00.000", "a/b", '{"x":1}')
    assert event.time_of_day() == time(10, 0, 0)


def test_parse_line_with_crlf():
    line = log_line("23:59:59.999", "plant/line1", "42") + "\r"

    event = parse_line(line)

    assert event is not None
    assert event.payload == "42"
    assert event.time_of_day() == time(23, 59, 59, 999000)


@pytest.mark.parametrize("line", [
    "",
    "   ",
    "2020-01-01 10:00:00.000 info PROCESS Processing log file",
    "2020-01-01 10:00:00 verb MQTT Message received with topic 'a/b' and data: {}",   # no millis
    "2020-01-01 10:00:00.000 verb MQTT Message received with topic a/b and data: {}",  # unquoted
    "2020-01-01 10:00:00.000 verb MQTT Message received with topic '' and data: {}",   # empty topic
    "2020-01-01 10:00:00.000 verb MQTT Message received with topic 'a/b' and data: ",  # empty payload
    "2020-01-01 25:61:00.000 verb MQTT Message received with topic 'a/b' and data: {}",
    "[gateway] " + log_line("10:00:00.000", "a/b", "1"),  # text before the date
    " " + log_line("10:00:00.000", "a/b", "1"),
])
def test_parse_line_miss(line):
    assert parse_line(line) is None


def test_payload_and_topic_kept_verbatim():
    payload = "{\"msg\": \"it's 'quoted', data: more\", \"list\": [1, 2]}"
    event = parse_line(log_line("10:00:00.000", "dev/it's/here", payload))

    assert event.topic == "dev/it's/here"
    assert event.payload == payload


def test_iter_events_skips_misses():
    lines = [
        "",
        log_line("10:00:00.000", "a/b", "1"),
        "garbage",
        log_line("10:00:01.000", "a/c", "2"),
        "",
    ]

    assert [e.topic for e in iter_events(lines)] == ["a/b", "a/c"]


@pytest.mark.parametrize("previous,current,expected", [
    (time(10, 0, 0), time(10, 0, 2, 500000), 2.5),
    (time(10, 0, 0), time(10, 0, 0), 0.0),
    (time(10, 0, 5), time(10, 0, 1), 0.0),            # out of order
    (time(23, 59, 59), time(0, 0, 1), 0.0),           # midnight wrap is not bridged
    (time(0, 0, 0), time(1, 0, 0, 1000), 3600.001),
])
def test_wait_seconds(previous, current, expected):
    assert wait_seconds(previous, current) == pytest.approx(expected)


def test_wait_ignores_date():
    first = parse_line(log_line("10:00:00.000", "a", "1", date="2020-01-01"))
    second = parse_line(log_line("10:00:01.000", "a", "2", date="2020-01-05"))

    assert wait_seconds(first.time_of_day(), second.time_of_day()) == pytest.approx(1.0)
