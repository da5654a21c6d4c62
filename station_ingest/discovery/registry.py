"""Registry of known station fields.

Maps each telemetry key the station firmware sends to the Home Assistant
entity it is announced as. The embedded `components.yaml` is parsed once
per process; a registry that fails to parse or has an entry without a
platform aborts startup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

EMBEDDED_COMPONENTS = "components.yaml"

_KNOWN_FIELDS = ("platform", "device_class", "icon", "unit_class", "unit", "name")


class RegistryError(RuntimeError):
    """The component registry is unusable. Fatal at startup."""


@dataclass(frozen=True)
class SensorDescriptor:
    """How one telemetry key maps to a discovery entity."""

    key: str
    platform: str
    device_class: Optional[str] = None
    icon: Optional[str] = None
    unit_class: Optional[str] = None
    unit: Optional[str] = None
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.key

    @classmethod
    def from_mapping(cls, key: str, raw: Any) -> "SensorDescriptor":
        if not isinstance(raw, dict):
            raise RegistryError(f"component {key!r} must be a mapping, got {type(raw).__name__}")

        unknown = set(raw) - set(_KNOWN_FIELDS)
        if unknown:
            raise RegistryError(f"component {key!r} has unknown fields: {sorted(unknown)}")

        platform = raw.get("platform")
        if not isinstance(platform, str) or not platform.strip():
            raise RegistryError(f"component {key!r} has no platform")

        values: Dict[str, Optional[str]] = {}
        for name in _KNOWN_FIELDS[1:]:
            value = raw.get(name)
            values[name] = None if value is None else str(value)

        return cls(key=key, platform=platform.strip(), **values)


class ComponentRegistry:
    """Read-only mapping telemetry key → SensorDescriptor.

    Safe to share between request threads: nothing mutates it after
    construction.
    """

    def __init__(self, sensors: Mapping[str, SensorDescriptor]):
        self._sensors = MappingProxyType(dict(sensors))

    @classmethod
    def from_yaml(cls, text: str) -> "ComponentRegistry":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise RegistryError(f"component registry is not valid YAML: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("sensors"), dict):
            raise RegistryError("component registry must have a 'sensors' mapping")

        sensors = {
            str(key): SensorDescriptor.from_mapping(str(key), raw)
            for key, raw in data["sensors"].items()
        }
        return cls(sensors)

    @classmethod
    def from_file(cls, path: str | Path) -> "ComponentRegistry":
        p = Path(path)
        if not p.exists():
            raise RegistryError(f"component registry not found: {p}")
        return cls.from_yaml(p.read_text(encoding="utf-8"))

    def lookup(self, key: str) -> Optional[SensorDescriptor]:
        return self._sensors.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._sensors

    def __iter__(self) -> Iterator[str]:
        return iter(self._sensors)

    def __len__(self) -> int:
        return len(self._sensors)


@lru_cache(maxsize=1)
def load_registry() -> ComponentRegistry:
    """Parse the registry shipped inside the package (once per process)."""
    text = resources.files(__package__).joinpath(EMBEDDED_COMPONENTS).read_text(encoding="utf-8")
    registry = ComponentRegistry.from_yaml(text)
    logger.info("[REGISTRY] Loaded %d embedded components", len(registry))
    return registry


def get_registry(components_file: Optional[str] = None) -> ComponentRegistry:
    if components_file:
        registry = ComponentRegistry.from_file(components_file)
        logger.info("[REGISTRY] Loaded %d components from %s", len(registry), components_file)
        return registry
    return load_registry()
