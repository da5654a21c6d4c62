"""Handler de reportes de estación.

Flujo por request:
  Received → RawPublished → DiscoveryPublished? → Acknowledged

1. Cada campo del reporte se publica tal cual en
   {topic_prefix}/{topic}/{key} (QoS 0, sin retain).
2. Con discovery activo, cada campo conocido publica availability,
   state y config (en ese orden, esperando el acuse de cada uno).
3. Los errores de publicación se registran y no llegan al cliente HTTP.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..core.domain.broker_interface import IMessagePublisher, Payload, PublishError
from ..core.domain.discovery import DeviceDefaults, DiscoveryDocument
from ..core.monitoring.stats import Stats
from ..discovery.builder import DiscoveryBuilder
from ..discovery.naming import station_identity
from ..discovery.registry import ComponentRegistry

logger = logging.getLogger(__name__)

PASSKEY_FIELD = "PASSKEY"
STATION_TYPE_FIELD = "stationtype"
DATE_FIELD = "dateutc"

# Fields describing the report itself, never announced as entities.
RESERVED_KEYS = frozenset({PASSKEY_FIELD, STATION_TYPE_FIELD, DATE_FIELD})

AVAILABILITY_ONLINE = "online"

TelemetrySet = Dict[str, str]


def parse_query(items: Iterable[Tuple[str, str]]) -> TelemetrySet:
    """Builds the telemetry set from query pairs.

    Keeps the first value of a repeated key and first-arrival order.
    """
    telemetry: TelemetrySet = {}
    for key, value in items:
        telemetry.setdefault(key, value)
    return telemetry


@dataclass
class ReportResult:
    """Resultado de procesar un reporte."""

    num_values: int = 0
    raw_published: int = 0
    published: int = 0
    discovery_documents: int = 0
    failed_publishes: int = 0
    unknown_keys: List[str] = field(default_factory=list)


class ReportHandler:
    """Procesa reportes y los publica en el bus.

    Stateless between requests apart from the shared counters; one
    instance serves every request thread.
    """

    def __init__(
        self,
        publisher: IMessagePublisher,
        *,
        topic_prefix: str,
        topic: str,
        discovery_enabled: bool = False,
        builder: Optional[DiscoveryBuilder] = None,
        object_id: Optional[str] = None,
        stats: Optional[Stats] = None,
    ):
        if discovery_enabled and builder is None:
            raise ValueError("discovery enabled without a DiscoveryBuilder")

        self._publisher = publisher
        self._topic_prefix = topic_prefix
        self._topic = topic
        self._discovery_enabled = discovery_enabled
        self._builder = builder
        self._object_id = object_id
        self.stats = stats or Stats()

    @classmethod
    def from_settings(
        cls,
        settings,
        publisher: IMessagePublisher,
        registry: ComponentRegistry,
    ) -> "ReportHandler":
        return cls(
            publisher,
            topic_prefix=settings.mqtt_topic_prefix,
            topic=settings.mqtt_topic,
            discovery_enabled=settings.hass_discovery,
            builder=DiscoveryBuilder(registry, DeviceDefaults.from_settings(settings)),
            object_id=settings.hass_object_id,
        )

    @property
    def discovery_enabled(self) -> bool:
        return self._discovery_enabled

    def raw_topic(self, key: str) -> str:
        return f"{self._topic_prefix}/{self._topic}/{key}"

    def handle(self, telemetry: TelemetrySet) -> ReportResult:
        result = ReportResult(num_values=len(telemetry))

        for key, value in telemetry.items():
            logger.info("[REPORT] %s = %s", key, value)
            if self._publish(self.raw_topic(key), value, qos=0, result=result):
                result.raw_published += 1

        if self._discovery_enabled:
            self._publish_discovery(telemetry, result)

        self.stats.mark_report(result.num_values, time.time())
        self.stats.record(
            published=result.published,
            failed=result.failed_publishes,
            discovery_documents=result.discovery_documents,
            unknown_keys=len(result.unknown_keys),
        )
        return result

    def _publish_discovery(self, telemetry: TelemetrySet, result: ReportResult) -> None:
        station_id = station_identity(telemetry.get(PASSKEY_FIELD), self._object_id)
        if not station_id:
            logger.warning("[DISCOVERY] Report has no %s and no object id is configured", PASSKEY_FIELD)

        station_type = telemetry.get(STATION_TYPE_FIELD) or ""

        for key, value in telemetry.items():
            if key in RESERVED_KEYS:
                continue

            doc = self._builder.build(key, station_id, station_type)
            if doc is None:
                logger.warning("[DISCOVERY] Got a key of %s - no component registered for it", key)
                result.unknown_keys.append(key)
                continue

            logger.info("[DISCOVERY] Processed key %s - topic %s", key, doc.availability_topic)
            result.discovery_documents += 1
            self._announce(doc, value, result)

    def _announce(self, doc: DiscoveryDocument, value: str, result: ReportResult) -> None:
        # Availability first so the hub never sees state/config for an
        # entity it has not seen come online.
        self._publish(doc.availability_topic, AVAILABILITY_ONLINE, qos=doc.qos, result=result)
        self._publish(doc.state_topic, value, qos=doc.qos, result=result)
        self._publish(doc.config_topic, doc.to_json(), qos=doc.qos, result=result)

    def _publish(self, topic: str, payload: Payload, *, qos: int, result: ReportResult) -> bool:
        try:
            self._publisher.publish(topic, payload, qos=qos, retain=False)
            result.published += 1
            return True
        except PublishError as e:
            result.failed_publishes += 1
            logger.error("[MQTT] Publish failed topic=%s: %s", topic, e.reason)
            return False
