"""Health and readiness endpoints."""

from fastapi import APIRouter, HTTPException, Request

from ..schemas import ExporterStats, HealthStatus

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthStatus)
def health():
    """Liveness probe: always returns ok if process is running."""
    return {"status": "ok"}


@router.get("/ready", response_model=HealthStatus)
def ready(request: Request):
    """Readiness probe: colector consumiendo y receptor MQTT conectado."""
    collector = request.app.state.collector
    receiver = request.app.state.receiver
    if collector is None or not collector.is_running:
        raise HTTPException(status_code=503, detail="collector not running")
    if receiver is None or not receiver.is_connected:
        raise HTTPException(status_code=503, detail="mqtt not connected")
    return {"status": "ready"}


@router.get("/stats", response_model=ExporterStats)
def stats(request: Request):
    collector = request.app.state.collector
    receiver = request.app.state.receiver
    if collector is None:
        raise HTTPException(status_code=503, detail="collector not started")
    return {
        "collector": collector.stats,
        "receiver": receiver.stats if receiver is not None else None,
    }
