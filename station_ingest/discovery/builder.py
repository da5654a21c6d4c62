"""Builds Home Assistant discovery documents for station fields."""

from __future__ import annotations

import logging
from typing import Optional

from ..core.domain.discovery import DISCOVERY_QOS, DeviceDefaults, DeviceInfo, DiscoveryDocument
from .naming import SensorTopics, unique_id
from .registry import ComponentRegistry, RegistryError

logger = logging.getLogger(__name__)


class DiscoveryBuilder:
    """Looks up a telemetry key and merges in the station's device block.

    Uso:
        builder = DiscoveryBuilder(load_registry(), DeviceDefaults())
        doc = builder.build("tempf", "AA-BB-CC", "AMBWeatherV4.3.2")
    """

    def __init__(self, registry: ComponentRegistry, device_defaults: Optional[DeviceDefaults] = None):
        self._registry = registry
        self._defaults = device_defaults or DeviceDefaults()

    @property
    def registry(self) -> ComponentRegistry:
        return self._registry

    def device_info(self, station_id: str, station_type: Optional[str]) -> DeviceInfo:
        return DeviceInfo(
            identifiers=[station_id],
            manufacturer=self._defaults.manufacturer,
            model=self._defaults.model,
            name=self._defaults.name,
            sw_version=station_type or "",
        )

    def build(
        self,
        key: str,
        station_id: str,
        station_type: Optional[str] = None,
    ) -> Optional[DiscoveryDocument]:
        """Returns None for keys the registry does not know."""
        descriptor = self._registry.lookup(key)
        if descriptor is None:
            return None

        if not descriptor.platform:
            raise RegistryError(f"component {key!r} has no platform")

        name = descriptor.display_name
        topics = SensorTopics.for_sensor(descriptor.platform, station_id, name)

        return DiscoveryDocument(
            availability_topic=topics.availability,
            state_topic=topics.state,
            config_topic=topics.config,
            unique_id=unique_id(key, station_id),
            name=name,
            platform=descriptor.platform,
            device=self.device_info(station_id, station_type),
            unit_of_measurement=descriptor.unit or "",
            icon=descriptor.icon or "",
            qos=DISCOVERY_QOS,
        )
