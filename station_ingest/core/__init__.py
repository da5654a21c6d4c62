"""Core module - Building blocks of the station bridge.

Structure:
- domain/      → Discovery models and publisher contract
- transport/   → MQTT publishing
- monitoring/  → Processing counters
"""
