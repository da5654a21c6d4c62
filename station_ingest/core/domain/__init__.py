"""Domain layer - Discovery models and publisher contract."""

from .broker_interface import BusError, IMessagePublisher, PublishError
from .discovery import DeviceDefaults, DeviceInfo, DiscoveryDocument

__all__ = [
    "BusError",
    "IMessagePublisher",
    "PublishError",
    "DeviceDefaults",
    "DeviceInfo",
    "DiscoveryDocument",
]
