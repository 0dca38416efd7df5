#!/usr/bin/env python3
"""
Generate a synthetic device log that mqtt-replayer can play back.

Output:
  - sample_device.log (one "message received" line per MQTT message,
    mixed with ordinary process log lines that the replayer skips)

Defaults:
  - 2025-09-17, starting 06:00:00.000, 15 minutes of data
  - One machine: wedo/industry/line1/SF-01
  - Sampling every 2 seconds
  - Minimal signals: state, counters, motor_current_a
"""

import argparse
import json
import random
from datetime import datetime, timedelta

from mqtt_replayer.parser import MARKER

NOISE = [
    "info PROCESS Heartbeat from device gateway",
    "verb MQTT Client trying to reconnect...",
    "warn MQTT Client went offline!",
    "info MQTT Successfully connected to MQTT broker",
]


def build_args(argv=None):
    p = argparse.ArgumentParser(description="Generate a sample device log for mqtt-replayer.")
    p.add_argument("--root", default="wedo/industry")
    p.add_argument("--line", default="line1")
    p.add_argument("--machine", default="SF-01")
    p.add_argument("--date", default="2025-09-17", help="YYYY-MM-DD")
    p.add_argument("--start", default="06:00:00", help="HH:MM:SS")
    p.add_argument("--minutes", type=int, default=15, help="Length of the recording")
    p.add_argument("--interval-sec", type=float, default=2.0, help="Sampling interval (seconds)")
    p.add_argument("--ideal-ct-s", type=float, default=12.0, help="Ideal cycle time per part (seconds)")
    p.add_argument("--reject-rate", type=float, default=0.02, help="Reject probability (0..1)")
    p.add_argument("--noise-rate", type=float, default=0.05, help="Share of non-MQTT lines (0..1)")
    p.add_argument("--seed", type=int, default=7)
    p.add_argument("--outfile", default="sample_device.log")
    return p.parse_args(argv)


def frand(mu=0.0, sigma=1.0):
    return random.gauss(mu, sigma)


def format_line(ts, topic, payload):
    """Render one entry the way the device gateway logged received messages."""
    stamp = ts.strftime("%Y-%m-%d %H:%M:%S.") + f"{ts.microsecond // 1000:03d}"
    return f"{stamp} {MARKER} '{topic}' and data: {payload}"


def state_for(t):
    # 0 STOPPED, 2 RUN, 3 IDLE, 4 FAULT
    mm = t.hour * 60 + t.minute
    if mm < 360:
        return 0 if random.random() < 0.9 else 3
    if 10 * 60 + 15 <= mm < 10 * 60 + 18:
        return 4
    if 13 * 60 <= mm < 13 * 60 + 30:
        return 3
    if mm < 1320:
        return 2 if random.random() < 0.9 else 3
    return 2 if random.random() < 0.5 else 3


def motor_current(state):
    if state == 2:
        return 10.0 + frand(0, 0.6)
    if state == 3:
        return 1.2 + frand(0, 0.2)
    if state == 4:
        return 0.3 + frand(0, 0.1)
    return 0.2 + frand(0, 0.1)


def generate_lines(start, minutes, interval_sec=2.0, root="wedo/industry", line="line1",
                   machine="SF-01", ideal_ct_s=12.0, reject_rate=0.02, noise_rate=0.05, seed=7):
    """
    Yield log lines in time order. Messages of one sample are a few
    milliseconds apart, as a real gateway would receive them.
    """
    if interval_sec <= 0:
        raise ValueError("interval_sec must be positive")
    random.seed(seed)
    base = f"{root}/{line}/{machine}"
    end = start + timedelta(minutes=minutes)

    parts_total = parts_good = 0
    accum_cycle = 0.0
    t = start
    while t < end:
        state = state_for(t)
        if state == 2:
            accum_cycle += interval_sec
            while accum_cycle >= ideal_ct_s:
                accum_cycle -= ideal_ct_s
                parts_total += 1
                if random.random() >= reject_rate:
                    parts_good += 1

        signals = [
            ("state", "state_code", state, None),
            ("state", "running", state == 2, None),
            ("counter", "parts_total", parts_total, "count"),
            ("counter", "parts_good", parts_good, "count"),
            ("sensor", "motor_current_a", round(motor_current(state), 3), "A"),
        ]
        ts = t
        for object_, metric, value, unit in signals:
            payload = {"ts": ts.isoformat(timespec="milliseconds"), "value": value, "q": "good"}
            if unit is not None:
                payload["unit"] = unit
            yield format_line(ts, f"{base}/{object_}/{metric}", json.dumps(payload, separators=(",", ":")))
            if random.random() < noise_rate:
                yield ts.strftime("%Y-%m-%d %H:%M:%S.") + f"{ts.microsecond // 1000:03d} " + random.choice(NOISE)
            ts = ts + timedelta(milliseconds=random.randint(1, 40))

        t = t + timedelta(seconds=interval_sec)


def main(argv=None):
    args = build_args(argv)
    start = datetime.strptime(f"{args.date} {args.start}", "%Y-%m-%d %H:%M:%S")

    count = 0
    with open(args.outfile, "w", encoding="utf-8", newline="\n") as f:
        for entry in generate_lines(
            start, args.minutes, args.interval_sec,
            root=args.root, line=args.line, machine=args.machine,
            ideal_ct_s=args.ideal_ct_s, reject_rate=args.reject_rate,
            noise_rate=args.noise_rate, seed=args.seed,
        ):
            f.write(entry + "\n")
            count += 1

    print(f"Generated {args.outfile} ({count} lines)")
    print("\nNext steps:")
    print("  mqtt-replayer -m localhost:1883 -f", args.outfile, "-v")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
