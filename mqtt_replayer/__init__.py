"""Replay recorded device MQTT traffic from a log file with its original timing."""

PROCESS_NAME = "MQTT Device Log Replayer"
__version__ = "1.0.0"
