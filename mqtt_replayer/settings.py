"""
Broker connection constants for the demo deployment.

Defaults live here; a YAML file (section ``mqtt``) and then REPLAYER_*
environment variables may override them.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml

DEFAULT_WAIT_FOR_MQTT = 1.0     # seconds between connection polls

CONFIG_SECTION = "mqtt"
ENV_PREFIX = "REPLAYER_"


@dataclass(frozen=True)
class Settings:
    username: Optional[str] = "iot"
    password: Optional[str] = "welcome1"
    client_id: str = "mqtt-replayer"
    reconnect_period: float = 1.0       # paho reconnect_delay_set min delay (s)
    reconnect_max_period: float = 1.0   # fixed period, like the device simulator
    connect_timeout: float = 30.0
    keepalive: int = 60
    wait_for_mqtt: float = DEFAULT_WAIT_FOR_MQTT


def load_config(file_path: str, section: Optional[str] = CONFIG_SECTION) -> Dict[str, Any]:
    """
    Load a YAML config file and return the given section (or the whole
    document when section is None). Missing sections read as empty.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError(f"{file_path}: top level must be a mapping")
    if section:
        config = config.get(section) or {}
        if not isinstance(config, dict):
            raise ValueError(f"{file_path}: section '{section}' must be a mapping")
    return config


_FLOATS = ("reconnect_period", "reconnect_max_period", "connect_timeout", "wait_for_mqtt")


def _coerce(name: str, value: Any) -> Any:
    if name in _FLOATS:
        return float(value)
    if name == "keepalive":
        return int(value)
    if value is None and name in ("username", "password"):
        return None
    return str(value)


def load_settings(file_path: Optional[str] = None, environ=None) -> Settings:
    environ = os.environ if environ is None else environ
    known = {f.name for f in fields(Settings)}
    overrides: Dict[str, Any] = {}

    if file_path:
        for key, value in load_config(file_path).items():
            if key not in known:
                raise ValueError(f"unknown setting '{key}' in {file_path}")
            overrides[key] = value

    for name in known:
        env_value = environ.get(ENV_PREFIX + name.upper())
        if env_value is not None:
            overrides[name] = env_value

    try:
        settings = replace(Settings(), **{k: _coerce(k, v) for k, v in overrides.items()})
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid setting: {e}") from e
    if settings.wait_for_mqtt <= 0:
        raise ValueError("wait_for_mqtt must be positive")
    return settings
