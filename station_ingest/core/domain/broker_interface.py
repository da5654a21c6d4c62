"""Abstract interface for the message bus publisher.

This decouples report handling from the MQTT client implementation.
Any publisher (paho-mqtt, in-memory fake) can implement this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union

Payload = Union[str, bytes]


class BusError(RuntimeError):
    """Base error raised by message bus publishers."""


class PublishError(BusError):
    """A single publish was rejected, not delivered or timed out."""

    def __init__(self, topic: str, reason: str):
        super().__init__(f"publish to {topic} failed: {reason}")
        self.topic = topic
        self.reason = reason


class IMessagePublisher(ABC):
    """Abstract interface for the message bus publisher.

    Implementations:
    - MQTTPublisher: publishes through paho-mqtt
    """

    @abstractmethod
    def publish(
        self,
        topic: str,
        payload: Payload,
        qos: int = 0,
        retain: bool = False,
    ) -> None:
        """Publish a payload and block until it is acknowledged.

        Args:
            topic: Destination topic
            payload: Message body
            qos: 0 (at most once) or 1 (at least once)
            retain: Ask the broker to keep the last message on the topic

        Raises:
            PublishError: If the broker rejects the message, the client is
                not connected or the acknowledgement does not arrive
        """

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the publisher is connected."""

