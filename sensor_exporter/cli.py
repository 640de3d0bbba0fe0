"""CLI entry point for the sensor exporter."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

import uvicorn

from common.config import get_settings

from .main import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    p = argparse.ArgumentParser(description="MQTT sensor telemetry → Prometheus exporter")
    p.add_argument("--host", default=settings.exporter_host)
    p.add_argument("--port", type=int, default=settings.exporter_port)
    p.add_argument("--log-level", default=settings.log_level)
    p.add_argument(
        "--stop-on-malformed",
        action="store_true",
        default=settings.sensor_stop_on_malformed,
        help="stop consuming after the first unparsable payload",
    )
    args = p.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    settings = replace(
        settings,
        exporter_host=args.host,
        exporter_port=args.port,
        sensor_stop_on_malformed=bool(args.stop_on_malformed),
    )

    logger.info("Sensor exporter started")
    logger.info(
        "Config: broker=%s:%d topic=%s prefix=%s",
        settings.mqtt_broker_host,
        settings.mqtt_broker_port,
        settings.mqtt_sensor_topic,
        settings.metrics_prefix,
    )

    uvicorn.run(
        create_app(settings),
        host=settings.exporter_host,
        port=settings.exporter_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
