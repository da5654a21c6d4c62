"""Tests de discovery de Home Assistant.

Cubre:
1. Nombres de topics e identidad de estación
2. Registro de componentes (YAML embebido y errores fatales)
3. Construcción de documentos de discovery

Ejecutar:
    pytest tests/test_discovery.py -v
"""

import json

import pytest

from station_ingest.core.domain.discovery import DeviceDefaults, DeviceInfo
from station_ingest.discovery.builder import DiscoveryBuilder
from station_ingest.discovery.naming import (
    SensorTopics,
    availability_topic,
    config_topic,
    state_topic,
    station_identity,
    unique_id,
)
from station_ingest.discovery.registry import (
    ComponentRegistry,
    RegistryError,
    SensorDescriptor,
    load_registry,
)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def builder(registry) -> DiscoveryBuilder:
    return DiscoveryBuilder(registry)


# =============================================================================
# TEST 1: NAMING
# =============================================================================

class TestNaming:
    """Topics y unique ids son un contrato fijo con Home Assistant."""

    def test_topic_formats(self):
        assert availability_topic("sensor", "AA-BB", "tempf") == "homeassistant/sensor/AA-BB/tempf/availability"
        assert state_topic("sensor", "AA-BB", "tempf") == "homeassistant/sensor/AA-BB/tempf/state"
        assert config_topic("binary_sensor", "AA-BB", "batt") == "homeassistant/binary_sensor/AA-BB/batt/config"

    def test_sensor_topics_match_individual_functions(self):
        topics = SensorTopics.for_sensor("sensor", "AA-BB", "Outdoor Temperature")

        assert topics.availability == availability_topic("sensor", "AA-BB", "Outdoor Temperature")
        assert topics.state == state_topic("sensor", "AA-BB", "Outdoor Temperature")
        assert topics.config == config_topic("sensor", "AA-BB", "Outdoor Temperature")

    def test_unique_id(self):
        assert unique_id("tempf", "AA-BB-CC") == "AA-BB-CC_tempf"

    def test_station_identity_replaces_colons(self):
        assert station_identity("AA:BB:CC:DD:EE:FF") == "AA-BB-CC-DD-EE-FF"

    def test_station_identity_is_idempotent(self):
        once = station_identity("AA:BB:CC")
        assert station_identity(once) == once

    def test_station_identity_override_wins(self):
        assert station_identity("AA:BB:CC", override="backyard") == "backyard"

    def test_station_identity_without_passkey(self):
        assert station_identity(None) == ""
        assert station_identity("", override="") == ""


# =============================================================================
# TEST 2: REGISTRY
# =============================================================================

class TestRegistry:
    """Registro de componentes."""

    def test_lookup_known_and_unknown(self, registry):
        descriptor = registry.lookup("tempf")

        assert descriptor == SensorDescriptor(
            key="tempf",
            platform="sensor",
            device_class="temperature",
            unit="°F",
            name="Outdoor Temperature",
        )
        assert registry.lookup("not-a-field") is None

    def test_display_name_falls_back_to_key(self, registry):
        assert registry.lookup("humidity").display_name == "humidity"

    def test_embedded_registry_loads(self):
        registry = load_registry()

        assert "tempf" in registry
        assert "humidity" in registry
        assert "PASSKEY" not in registry
        assert all(registry.lookup(key).platform for key in registry)

    def test_embedded_registry_is_cached(self):
        assert load_registry() is load_registry()

    def test_missing_platform_is_fatal(self):
        with pytest.raises(RegistryError, match="no platform"):
            ComponentRegistry.from_yaml("sensors:\n  tempf:\n    unit: F\n")

    def test_blank_platform_is_fatal(self):
        with pytest.raises(RegistryError, match="no platform"):
            ComponentRegistry.from_yaml("sensors:\n  tempf:\n    platform: ''\n")

    def test_invalid_yaml_is_fatal(self):
        with pytest.raises(RegistryError, match="not valid YAML"):
            ComponentRegistry.from_yaml("sensors: [unclosed")

    def test_missing_sensors_section_is_fatal(self):
        with pytest.raises(RegistryError, match="'sensors' mapping"):
            ComponentRegistry.from_yaml("components: {}")

    def test_unknown_field_is_fatal(self):
        with pytest.raises(RegistryError, match="unknown fields"):
            ComponentRegistry.from_yaml("sensors:\n  tempf:\n    platform: sensor\n    colour: red\n")

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(RegistryError, match="not found"):
            ComponentRegistry.from_file(tmp_path / "missing.yaml")

    def test_from_file(self, tmp_path):
        path = tmp_path / "components.yaml"
        path.write_text("sensors:\n  co2:\n    platform: sensor\n    unit: ppm\n", encoding="utf-8")

        registry = ComponentRegistry.from_file(path)

        assert len(registry) == 1
        assert registry.lookup("co2").unit == "ppm"


# =============================================================================
# TEST 3: BUILDER
# =============================================================================

class TestDiscoveryBuilder:
    """Documentos de discovery por campo."""

    def test_unknown_key_returns_none(self, builder):
        assert builder.build("soilhum9", "AA-BB-CC", "AMBWeatherV4.3.2") is None

    @pytest.mark.parametrize("key", ["tempf", "humidity", "uv", "battout"])
    def test_unique_id_and_shared_topic_prefix(self, builder, registry, key):
        doc = builder.build(key, "AA-BB-CC")
        descriptor = registry.lookup(key)
        prefix = f"homeassistant/{descriptor.platform}/AA-BB-CC/{descriptor.display_name}"

        assert doc.unique_id == f"AA-BB-CC_{key}"
        assert doc.availability_topic == f"{prefix}/availability"
        assert doc.state_topic == f"{prefix}/state"
        assert doc.config_topic == f"{prefix}/config"

    def test_document_fields(self, builder):
        doc = builder.build("tempf", "AA-BB-CC", "AMBWeatherV4.3.2")

        assert doc.name == "Outdoor Temperature"
        assert doc.platform == "sensor"
        assert doc.unit_of_measurement == "°F"
        assert doc.qos == 1
        assert doc.device == DeviceInfo(
            identifiers=["AA-BB-CC"],
            manufacturer="Ambient Weather",
            model="ws-2902a",
            name="ws-2902a",
            sw_version="AMBWeatherV4.3.2",
        )

    def test_name_falls_back_to_key(self, builder):
        doc = builder.build("humidity", "AA-BB-CC")

        assert doc.name == "humidity"
        assert doc.state_topic == "homeassistant/sensor/AA-BB-CC/humidity/state"

    def test_station_type_is_not_truncated(self, builder):
        doc = builder.build("tempf", "AA-BB-CC", "WS2900C_V2.01.18")
        assert doc.device.sw_version == "WS2900C_V2.01.18"

    def test_station_type_absent(self, builder):
        assert builder.build("tempf", "AA-BB-CC").device.sw_version == ""
        assert builder.build("tempf", "AA-BB-CC", None).device.sw_version == ""

    def test_configured_device_metadata(self, registry):
        defaults = DeviceDefaults(model="WS-5000", name="Backyard", manufacturer="Ambient")
        doc = DiscoveryBuilder(registry, defaults).build("tempf", "AA-BB-CC")

        assert doc.device.model == "WS-5000"
        assert doc.device.name == "Backyard"
        assert doc.device.manufacturer == "Ambient"

    def test_defaults_from_settings_fill_blanks(self, settings_factory):
        defaults = DeviceDefaults.from_settings(settings_factory(hass_device_name="Garden"))

        assert defaults == DeviceDefaults(model="ws-2902a", name="Garden", manufacturer="Ambient Weather")

    def test_payload_keys(self, builder):
        payload = json.loads(builder.build("tempf", "AA-BB-CC", "V1").to_json())

        assert set(payload) == {
            "availability_topic",
            "device",
            "name",
            "qos",
            "state_topic",
            "unique_id",
            "unit_of_measurement",
        }
        assert payload["device"] == {
            "identifiers": ["AA-BB-CC"],
            "manufacturer": "Ambient Weather",
            "model": "ws-2902a",
            "name": "ws-2902a",
            "sw_version": "V1",
        }
        assert payload["qos"] == 1

    def test_icon_included_only_when_set(self, builder):
        with_icon = builder.build("uv", "AA-BB-CC").to_payload()
        without_icon = builder.build("tempf", "AA-BB-CC").to_payload()

        assert with_icon["icon"] == "mdi:sun-wireless-outline"
        assert "icon" not in without_icon

    def test_unit_empty_when_not_registered(self, builder):
        payload = builder.build("battout", "AA-BB-CC").to_payload()

        assert payload["unit_of_measurement"] == ""
        assert payload["state_topic"] == "homeassistant/binary_sensor/AA-BB-CC/Outdoor Battery/state"
