"""Ambient Weather station reports → MQTT, with Home Assistant discovery."""

__version__ = "0.4.0"
