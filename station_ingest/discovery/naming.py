"""Topic and identity naming for Home Assistant discovery.

Home Assistant correlates the availability, state and config topics of
one entity by their shared prefix, so these strings are a fixed contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DISCOVERY_PREFIX = "homeassistant"


def _sensor_base(platform: str, station_id: str, sensor_name: str) -> str:
    return f"{DISCOVERY_PREFIX}/{platform}/{station_id}/{sensor_name}"


def availability_topic(platform: str, station_id: str, sensor_name: str) -> str:
    return f"{_sensor_base(platform, station_id, sensor_name)}/availability"


def state_topic(platform: str, station_id: str, sensor_name: str) -> str:
    return f"{_sensor_base(platform, station_id, sensor_name)}/state"


def config_topic(platform: str, station_id: str, sensor_name: str) -> str:
    return f"{_sensor_base(platform, station_id, sensor_name)}/config"


def unique_id(key: str, station_id: str) -> str:
    return f"{station_id}_{key}"


def station_identity(passkey: Optional[str], override: Optional[str] = None) -> str:
    """Device identifier shared by every sensor of a station.

    The configured override wins; otherwise the station passkey (a MAC
    address) with ':' replaced by '-'.
    """
    if override:
        return override
    return (passkey or "").replace(":", "-")


@dataclass(frozen=True)
class SensorTopics:
    availability: str
    state: str
    config: str

    @classmethod
    def for_sensor(cls, platform: str, station_id: str, sensor_name: str) -> "SensorTopics":
        base = _sensor_base(platform, station_id, sensor_name)
        return cls(
            availability=f"{base}/availability",
            state=f"{base}/state",
            config=f"{base}/config",
        )
