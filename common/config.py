from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class ConfigError(RuntimeError):
    """Configuration is missing or cannot be parsed. Fatal at startup."""


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_log_level(value: str, source: str = "LOG_LEVEL") -> str:
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"{source} must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
    return level


def _default_env_file() -> str:
    # Env file next to the working directory, as the station add-on ships it.
    return str(Path.cwd() / ".env")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default)).strip()
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_str(name: str) -> Optional[str]:
    return os.getenv(name) or None


@dataclass(frozen=True)
class Settings:
    http_host: str
    http_port: int

    mqtt_broker_host: str
    mqtt_broker_port: int
    mqtt_username: Optional[str]
    mqtt_password: Optional[str]
    mqtt_client_id: str
    mqtt_topic_prefix: str
    mqtt_topic: str
    mqtt_publish_timeout: float

    hass_discovery: bool
    hass_object_id: Optional[str]
    hass_device_model: Optional[str]
    hass_device_name: Optional[str]
    hass_manufacturer: Optional[str]
    hass_components_file: Optional[str]

    log_level: str

    @property
    def has_credentials(self) -> bool:
        return bool(self.mqtt_username and self.mqtt_password)


def get_settings(env_file: Optional[str] = None) -> Settings:
    # An explicit env file must exist; the default one is optional.
    if env_file is not None:
        if not Path(env_file).exists():
            raise ConfigError(f"Env file not found: {env_file}")
        load_dotenv(env_file, override=False)
    else:
        default_file = os.getenv("AMBIENT_ENV_FILE", _default_env_file())
        if default_file and Path(default_file).exists():
            load_dotenv(default_file, override=False)

    port = _env_int("HTTP_PORT", 8080)
    broker_port = _env_int("MQTT_BROKER_PORT", 1883)
    for name, value in (("HTTP_PORT", port), ("MQTT_BROKER_PORT", broker_port)):
        if not 0 < value < 65536:
            raise ConfigError(f"{name} out of range: {value}")

    broker_host = os.getenv("MQTT_BROKER_HOST", "localhost").strip()
    if not broker_host:
        raise ConfigError("MQTT_BROKER_HOST is empty")

    return Settings(
        http_host=os.getenv("HTTP_HOST", "0.0.0.0"),
        http_port=port,
        mqtt_broker_host=broker_host,
        mqtt_broker_port=broker_port,
        mqtt_username=_env_str("MQTT_USERNAME"),
        mqtt_password=_env_str("MQTT_PASSWORD"),
        mqtt_client_id=os.getenv("MQTT_CLIENT_ID", "ambient2mqtt"),
        mqtt_topic_prefix=os.getenv("MQTT_TOPIC_PREFIX", "ambient"),
        mqtt_topic=os.getenv("MQTT_TOPIC", "weather"),
        mqtt_publish_timeout=_env_float("MQTT_PUBLISH_TIMEOUT", 10.0),
        hass_discovery=_env_bool("HASS_DISCOVERY", False),
        hass_object_id=_env_str("HASS_OBJECT_ID"),
        hass_device_model=_env_str("HASS_DEVICE_MODEL"),
        hass_device_name=_env_str("HASS_DEVICE_NAME"),
        hass_manufacturer=_env_str("HASS_MANUFACTURER"),
        hass_components_file=_env_str("HASS_COMPONENTS_FILE"),
        log_level=parse_log_level(os.getenv("LOG_LEVEL") or "INFO"),
    )
