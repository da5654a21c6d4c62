"""CLI entry point for the station bridge."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from common.config import ConfigError, get_settings, parse_log_level

from .core.transport.mqtt_client import MQTTPublisher
from .discovery.registry import RegistryError, get_registry
from .main import create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Republish Ambient Weather station reports to MQTT")
    p.add_argument("--env-file", default=None, help="file with configuration variables")
    p.add_argument("--host", default=None, help="override HTTP_HOST")
    p.add_argument("--port", type=int, default=None, help="override HTTP_PORT")
    p.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings(args.env_file)
        log_level = parse_log_level(args.log_level, "--log-level") if args.log_level else settings.log_level
    except ConfigError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Invalid configuration: %s", e)
        return 2

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    try:
        registry = get_registry(settings.hass_components_file)
    except RegistryError as e:
        logger.error("Component registry unusable: %s", e)
        return 2

    publisher = MQTTPublisher.from_settings(settings)
    if not publisher.connect():
        logger.error(
            "Cannot connect to MQTT broker %s:%d",
            settings.mqtt_broker_host,
            settings.mqtt_broker_port,
        )
        return 1

    app = create_app(settings, publisher=publisher, registry=registry)
    host = args.host or settings.http_host
    port = args.port or settings.http_port
    logger.info("listening for inbound Ambient Weather HTTP requests on %s:%d", host, port)

    try:
        uvicorn.run(app, host=host, port=port, log_level=log_level.lower())
    finally:
        publisher.disconnect()
    return 0


if __name__ == "__main__":
    sys.exit(main())
