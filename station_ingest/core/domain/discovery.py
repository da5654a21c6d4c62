"""Home Assistant discovery documents."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List

DEFAULT_DEVICE_MODEL = "ws-2902a"
DEFAULT_DEVICE_NAME = "ws-2902a"
DEFAULT_MANUFACTURER = "Ambient Weather"

DISCOVERY_QOS = 1


@dataclass(frozen=True)
class DeviceInfo:
    """Device block shared by every sensor of one station."""

    identifiers: List[str]
    manufacturer: str = DEFAULT_MANUFACTURER
    model: str = DEFAULT_DEVICE_MODEL
    name: str = DEFAULT_DEVICE_NAME
    sw_version: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifiers": list(self.identifiers),
            "manufacturer": self.manufacturer,
            "model": self.model,
            "name": self.name,
            "sw_version": self.sw_version,
        }


@dataclass(frozen=True)
class DiscoveryDocument:
    """Discovery config for one sensor entity.

    `config_topic` and `platform` are routing data and are not part of
    the published payload.
    """

    availability_topic: str
    state_topic: str
    config_topic: str
    unique_id: str
    name: str
    platform: str
    device: DeviceInfo
    unit_of_measurement: str = ""
    icon: str = ""
    qos: int = DISCOVERY_QOS

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "availability_topic": self.availability_topic,
            "device": self.device.to_dict(),
            "name": self.name,
            "qos": self.qos,
            "state_topic": self.state_topic,
            "unique_id": self.unique_id,
        }
        if self.icon:
            payload["icon"] = self.icon
        payload["unit_of_measurement"] = self.unit_of_measurement
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), separators=(",", ":"))


@dataclass(frozen=True)
class DeviceDefaults:
    """Configured device metadata; blanks fall back to the built-in defaults."""

    model: str = DEFAULT_DEVICE_MODEL
    name: str = DEFAULT_DEVICE_NAME
    manufacturer: str = DEFAULT_MANUFACTURER

    @classmethod
    def from_settings(cls, settings) -> "DeviceDefaults":
        return cls(
            model=settings.hass_device_model or DEFAULT_DEVICE_MODEL,
            name=settings.hass_device_name or DEFAULT_DEVICE_NAME,
            manufacturer=settings.hass_manufacturer or DEFAULT_MANUFACTURER,
        )
