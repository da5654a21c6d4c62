"""Fixtures compartidos."""

from __future__ import annotations

import dataclasses
import threading
from typing import List, Optional, Set, Tuple

import pytest

from common.config import Settings
from station_ingest.core.domain.broker_interface import IMessagePublisher, Payload, PublishError
from station_ingest.discovery.registry import ComponentRegistry


REGISTRY_YAML = """
sensors:
  tempf:
    platform: sensor
    device_class: temperature
    unit: "°F"
    name: Outdoor Temperature
  humidity:
    platform: sensor
    device_class: humidity
    unit: "%"
  uv:
    platform: sensor
    icon: mdi:sun-wireless-outline
    unit: UV index
    name: UV Index
  battout:
    platform: binary_sensor
    device_class: battery
    name: Outdoor Battery
"""


class RecordingPublisher(IMessagePublisher):
    """In-memory publisher that records every publish in call order."""

    def __init__(self, fail_topics: Optional[Set[str]] = None, connected: bool = True):
        self.messages: List[Tuple[str, Payload, int, bool]] = []
        self.fail_topics = set(fail_topics or ())
        self.connected = connected
        self._lock = threading.Lock()

    def publish(self, topic: str, payload: Payload, qos: int = 0, retain: bool = False) -> None:
        if topic in self.fail_topics:
            raise PublishError(topic, "not authorized")
        with self._lock:
            self.messages.append((topic, payload, qos, retain))

    def is_connected(self) -> bool:
        return self.connected

    @property
    def topics(self) -> List[str]:
        return [m[0] for m in self.messages]

    def payload_for(self, topic: str) -> Payload:
        for t, payload, _, _ in self.messages:
            if t == topic:
                return payload
        raise KeyError(topic)


BASE_SETTINGS = Settings(
    http_host="127.0.0.1",
    http_port=8080,
    mqtt_broker_host="broker.test",
    mqtt_broker_port=1883,
    mqtt_username=None,
    mqtt_password=None,
    mqtt_client_id="ambient2mqtt-test",
    mqtt_topic_prefix="ambient",
    mqtt_topic="weather",
    mqtt_publish_timeout=1.0,
    hass_discovery=True,
    hass_object_id=None,
    hass_device_model=None,
    hass_device_name=None,
    hass_manufacturer=None,
    hass_components_file=None,
    log_level="INFO",
)


def make_settings(**overrides) -> Settings:
    return dataclasses.replace(BASE_SETTINGS, **overrides)


@pytest.fixture
def registry() -> ComponentRegistry:
    return ComponentRegistry.from_yaml(REGISTRY_YAML)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def settings_factory():
    return make_settings
