"""Health and readiness endpoints."""

from fastapi import APIRouter, HTTPException, Request

from ..schemas import MQTTHealth, ReadyStatus

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness probe: always returns ok if process is running."""
    return {"status": "ok"}


@router.get("/ready", response_model=ReadyStatus)
def ready(request: Request):
    """Readiness probe: checks the MQTT connection."""
    if not request.app.state.publisher.is_connected():
        raise HTTPException(status_code=503, detail="not ready")
    return ReadyStatus(status="ready")


@router.get("/health/mqtt", response_model=MQTTHealth)
def mqtt_health(request: Request):
    """Estado del cliente MQTT y contadores de procesamiento.

    Returns:
        {"status": "ok|disconnected", "broker": "host:port", ...}
    """
    settings = request.app.state.settings
    publisher = request.app.state.publisher
    handler = request.app.state.report_handler
    connected = publisher.is_connected()

    return MQTTHealth(
        status="ok" if connected else "disconnected",
        broker=f"{settings.mqtt_broker_host}:{settings.mqtt_broker_port}",
        connected=connected,
        discovery=handler.discovery_enabled,
        stats=handler.stats.to_dict(),
        client_id=settings.mqtt_client_id,
    )
