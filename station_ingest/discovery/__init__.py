"""Home Assistant MQTT discovery.

- registry.py: known station fields (embedded components.yaml)
- naming.py: topic and unique id rules
- builder.py: discovery documents per field
"""

from .builder import DiscoveryBuilder
from .naming import (
    DISCOVERY_PREFIX,
    SensorTopics,
    availability_topic,
    config_topic,
    state_topic,
    station_identity,
    unique_id,
)
from .registry import ComponentRegistry, RegistryError, SensorDescriptor, get_registry, load_registry

__all__ = [
    "DiscoveryBuilder",
    "DISCOVERY_PREFIX",
    "SensorTopics",
    "availability_topic",
    "config_topic",
    "state_topic",
    "station_identity",
    "unique_id",
    "ComponentRegistry",
    "RegistryError",
    "SensorDescriptor",
    "get_registry",
    "load_registry",
]
