#!/usr/bin/env python3
import argparse
import asyncio
import dataclasses
import logging
import os

from mqtt_replayer import PROCESS_NAME, __version__
from mqtt_replayer.gate import ConnectionGate
from mqtt_replayer.logger import setup_logger
from mqtt_replayer.publisher import Publisher
from mqtt_replayer.scheduler import ReplayScheduler
from mqtt_replayer.settings import load_settings
from mqtt_replayer.transport import MqttTransport, parse_broker_uri

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

logger = logging.getLogger(__name__)


def build_parser():
    ap = argparse.ArgumentParser(
        prog="mqtt-replayer",
        description=f"{PROCESS_NAME} {__version__}: replay device MQTT messages from a log file",
    )
    ap.add_argument("-m", "--mqttbroker", metavar="ADDRESS:PORT",
                    help="MQTT broker address, e.g. localhost:1883 or mqtts://host:8883")
    ap.add_argument("-f", "--logfile", metavar="FILE", help="Log file used for simulation")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    ap.add_argument("--speed", type=float, default=1.0, help="Time accel (1.0=real-time)")
    ap.add_argument("--loop", action="store_true", help="Replay the file over and over")
    ap.add_argument("--qos", type=int, choices=(0, 1, 2), default=0)
    ap.add_argument("--retain", action="store_true")
    ap.add_argument("--client-id")
    ap.add_argument("--username")
    ap.add_argument("--password")
    ap.add_argument("--config", metavar="YAML", help="Settings file (section 'mqtt')")
    ap.add_argument("--log-to-file", metavar="PATH", help="Also write the log to PATH, rotated daily")
    return ap


async def replay(lines, broker, settings, speed=1.0, loop_forever=False, qos=0, retain=False,
                 transport_factory=None):
    """
    Connect in the background and replay the lines; returns the number of
    events published. The first publish waits on the gate, not the caller.
    """
    gate = ConnectionGate(settings.wait_for_mqtt)
    transport = (transport_factory or MqttTransport)(broker, gate, settings, loop=asyncio.get_running_loop())
    transport.start()
    total = 0
    try:
        while True:
            scheduler = ReplayScheduler(Publisher(transport, gate, qos=qos, retain=retain), speed=speed)
            published = await scheduler.run(lines)
            total += published
            if not loop_forever:
                break
            if not published:
                logger.warning("Nothing to replay, not looping")
                break
    finally:
        transport.close()
    return total


def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)

    if not (args.mqttbroker and args.logfile):
        ap.print_help()
        return EXIT_FAILURE
    if args.speed <= 0:
        ap.print_help()
        return EXIT_FAILURE

    setup_logger(verbose=args.verbose, log_file=args.log_to_file)
    logger.info("%s - %s", PROCESS_NAME, __version__)

    try:
        settings = load_settings(args.config)
        overrides = {k: v for k, v in (("client_id", args.client_id),
                                       ("username", args.username),
                                       ("password", args.password)) if v is not None}
        settings = dataclasses.replace(settings, **overrides)
        broker = parse_broker_uri(args.mqttbroker)
    except (OSError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_FAILURE

    if not (os.path.isfile(args.logfile) and os.access(args.logfile, os.R_OK)):
        logger.error("File %s does not exist or is not readable", args.logfile)
        return EXIT_FAILURE

    try:
        with open(args.logfile, "r", encoding="utf-8") as f:
            lines = f.read().split("\n")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("File %s does not exist or is not readable: %s", args.logfile, e)
        return EXIT_FAILURE
    logger.info("Processing log file: %s (%d entries)", args.logfile, len(lines))

    try:
        asyncio.run(replay(lines, broker, settings, speed=args.speed, loop_forever=args.loop,
                           qos=args.qos, retain=args.retain))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.error("Aborting. Severe error: %s", e, exc_info=True)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
