"""Cliente MQTT para publicación de lecturas de estación."""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

import paho.mqtt.client as mqtt

from ..domain.broker_interface import IMessagePublisher, Payload, PublishError

logger = logging.getLogger(__name__)


class MQTTPublisher(IMessagePublisher):
    """Cliente MQTT ligero para publicación.

    Responsabilidades:
    - Conexión/desconexión a broker MQTT
    - Reconexión automática (delegada al loop de paho)
    - Publicación bloqueante hasta el acuse del broker

    Un único cliente se comparte entre todos los requests; paho permite
    llamar a publish() desde varios hilos a la vez.
    """

    def __init__(
        self,
        broker_host: str = "localhost",
        broker_port: int = 1883,
        username: Optional[str] = None,
        password: Optional[str] = None,
        client_id: str = "ambient2mqtt",
        publish_timeout: float = 10.0,
    ):
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.username = username
        self.password = password
        self.client_id = client_id
        self.publish_timeout = publish_timeout

        self._client: Optional[mqtt.Client] = None
        self._connected = threading.Event()

    @classmethod
    def from_settings(cls, settings) -> "MQTTPublisher":
        return cls(
            broker_host=settings.mqtt_broker_host,
            broker_port=settings.mqtt_broker_port,
            username=settings.mqtt_username,
            password=settings.mqtt_password,
            client_id=settings.mqtt_client_id,
            publish_timeout=settings.mqtt_publish_timeout,
        )

    def _build_client(self) -> mqtt.Client:
        client = mqtt.Client(
            client_id=self.client_id,
            protocol=mqtt.MQTTv311,
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
        )
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect

        # Credentials only when both halves are configured.
        if self.username and self.password:
            client.username_pw_set(self.username, self.password)

        client.reconnect_delay_set(min_delay=1, max_delay=120)
        return client

    def connect(self, wait_seconds: float = 5.0) -> bool:
        """Conecta al broker MQTT."""
        try:
            self._client = self._build_client()

            logger.info("[MQTT] Connecting to %s:%d", self.broker_host, self.broker_port)
            self._client.connect(self.broker_host, self.broker_port, keepalive=60)
            self._client.loop_start()
        except (OSError, ValueError) as e:
            logger.error("[MQTT] Connection failed: %s", e)
            return False

        if self._connected.wait(timeout=wait_seconds):
            return True

        logger.error("[MQTT] Connection timeout")
        return False

    def disconnect(self) -> None:
        """Desconecta del broker."""
        if self._client:
            try:
                self._client.loop_stop()
                self._client.disconnect()
            except (OSError, RuntimeError) as e:
                logger.warning("[MQTT] Disconnect error: %s", e)
        self._connected.clear()

    def publish(
        self,
        topic: str,
        payload: Payload,
        qos: int = 0,
        retain: bool = False,
    ) -> None:
        if self._client is None:
            raise PublishError(topic, "client not started")

        started = time.perf_counter()
        try:
            info = self._client.publish(topic, payload, qos=qos, retain=retain)
        except ValueError as e:
            raise PublishError(topic, str(e)) from e

        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise PublishError(topic, mqtt.error_string(info.rc))

        try:
            info.wait_for_publish(timeout=self.publish_timeout)
        except (RuntimeError, ValueError) as e:
            raise PublishError(topic, str(e)) from e

        if not info.is_published():
            raise PublishError(topic, f"no acknowledgement after {self.publish_timeout:.1f}s")

        logger.debug(
            "[MQTT] Published topic=%s qos=%d retain=%s in %.1fms",
            topic,
            qos,
            retain,
            (time.perf_counter() - started) * 1000,
        )

    def is_connected(self) -> bool:
        return self._connected.is_set()

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de conexión."""
        if reason_code == 0:
            self._connected.set()
            logger.info("[MQTT] Connected to broker %s:%d", self.broker_host, self.broker_port)
        else:
            self._connected.clear()
            logger.error("[MQTT] Connection refused: %s", reason_code)

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de desconexión."""
        self._connected.clear()
        logger.error("[MQTT] Connection lost: %s", reason_code)
