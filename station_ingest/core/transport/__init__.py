"""Transport layer - Publicación MQTT."""

from .mqtt_client import MQTTPublisher

__all__ = ["MQTTPublisher"]
