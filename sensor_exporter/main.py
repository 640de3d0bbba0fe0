from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from prometheus_client import REGISTRY, CollectorRegistry, make_asgi_app

from common.config import Settings, get_settings

from .endpoints import health_router
from .metrics import PrometheusMetricSink, register_sensor_gauges
from .mqtt import MQTTReceiver, SensorCollector

logger = logging.getLogger(__name__)

ReceiverFactory = Callable[[SensorCollector, Settings], MQTTReceiver]


def _default_receiver(collector: SensorCollector, settings: Settings) -> MQTTReceiver:
    return MQTTReceiver(
        collector,
        broker_host=settings.mqtt_broker_host,
        broker_port=settings.mqtt_broker_port,
        username=settings.mqtt_username,
        password=settings.mqtt_password,
        client_id=settings.mqtt_client_id,
        topic=settings.mqtt_sensor_topic,
    )


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[CollectorRegistry] = None,
    receiver_factory: Optional[ReceiverFactory] = None,
) -> FastAPI:
    """App FastAPI: /metrics para Prometheus + health/stats.

    El sink y las series se registran una sola vez en el arranque, antes de
    que el colector consuma el primer mensaje.
    """
    settings = settings or get_settings()
    registry = registry if registry is not None else REGISTRY
    receiver_factory = receiver_factory or _default_receiver

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sink = PrometheusMetricSink(registry)
        register_sensor_gauges(sink, settings.metrics_prefix)

        collector = SensorCollector(
            sink,
            max_queue_size=settings.sensor_queue_size,
            stop_on_malformed=settings.sensor_stop_on_malformed,
        )
        collector.start()
        app.state.collector = collector

        receiver = receiver_factory(collector, settings)
        if not receiver.start():
            logger.error(
                "[APP] MQTT receiver not connected (%s:%d), serving metrics anyway",
                settings.mqtt_broker_host,
                settings.mqtt_broker_port,
            )
        app.state.receiver = receiver

        try:
            yield
        finally:
            receiver.stop()
            collector.close()
            collector.join(timeout=5.0)

    app = FastAPI(title="Sensor Exporter", version="0.1.0", lifespan=lifespan)
    app.state.collector = None
    app.state.receiver = None
    app.include_router(health_router)
    app.mount("/metrics", make_asgi_app(registry=registry))
    return app
