from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _default_env_file() -> str:
    return str(Path.cwd() / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    mqtt_broker_host: str
    mqtt_broker_port: int
    mqtt_username: Optional[str]
    mqtt_password: Optional[str]
    mqtt_client_id: str
    mqtt_sensor_topic: str

    metrics_prefix: str
    exporter_host: str
    exporter_port: int

    # 0 = cola sin límite
    sensor_queue_size: int
    sensor_stop_on_malformed: bool

    log_level: str


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("SENSOR_EXPORTER_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    return Settings(
        mqtt_broker_host=os.getenv("MQTT_BROKER_HOST", "localhost"),
        mqtt_broker_port=int(os.getenv("MQTT_BROKER_PORT", "1883")),
        mqtt_username=os.getenv("MQTT_USERNAME") or None,
        mqtt_password=os.getenv("MQTT_PASSWORD") or None,
        mqtt_client_id=os.getenv("MQTT_CLIENT_ID", "tasmota_sensor"),
        mqtt_sensor_topic=os.getenv("MQTT_SENSOR_TOPIC", "+/tele/SENSOR"),
        metrics_prefix=os.getenv("METRICS_PREFIX", "mqtt"),
        exporter_host=os.getenv("EXPORTER_HOST", "0.0.0.0"),
        exporter_port=int(os.getenv("EXPORTER_PORT", "9092")),
        sensor_queue_size=int(os.getenv("SENSOR_QUEUE_SIZE", "0")),
        sensor_stop_on_malformed=_env_bool("SENSOR_STOP_ON_MALFORMED", "false"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
