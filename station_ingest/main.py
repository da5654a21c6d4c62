"""FastAPI application for the station bridge.

Run with the CLI (`ambient2mqtt`) or directly through uvicorn:
    uvicorn station_ingest.main:create_app --factory --port 8080
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from common.config import Settings, get_settings

from . import __version__
from .core.domain.broker_interface import BusError, IMessagePublisher
from .core.transport.mqtt_client import MQTTPublisher
from .discovery.registry import ComponentRegistry, get_registry
from .endpoints import health_router, report_router
from .ingest.report_handler import ReportHandler

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    publisher: Optional[IMessagePublisher] = None,
    registry: Optional[ComponentRegistry] = None,
) -> FastAPI:
    """Wires settings, registry, publisher and handler into an app.

    A publisher passed in is owned by the caller; otherwise the app
    builds an MQTTPublisher and connects it during startup, refusing to
    serve if the broker is unreachable.
    """
    if settings is None:
        settings = get_settings()
    if registry is None:
        registry = get_registry(settings.hass_components_file)

    owns_publisher = publisher is None
    if publisher is None:
        publisher = MQTTPublisher.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if owns_publisher:
            if not publisher.connect():
                raise BusError(
                    f"cannot connect to MQTT broker {settings.mqtt_broker_host}:{settings.mqtt_broker_port}"
                )
        logger.info(
            "[APP] Listening for Ambient Weather reports (discovery=%s)",
            settings.hass_discovery,
        )
        try:
            yield
        finally:
            if owns_publisher:
                publisher.disconnect()

    app = FastAPI(title="Ambient Weather MQTT Bridge", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.publisher = publisher
    app.state.report_handler = ReportHandler.from_settings(settings, publisher, registry)

    app.include_router(health_router)
    app.include_router(report_router)
    return app
