"""Filtro de topics MQTT.

Formato esperado: {device}/{prefix}/SENSOR, e.g. ``dev1/tele/SENSOR``.
"""

from __future__ import annotations

TOPIC_SEPARATOR = "/"
SENSOR_TOPIC_SUFFIX = "SENSOR"


def is_sensor_topic(topic: str) -> bool:
    """True si el topic tiene tres segmentos y el tercero es SENSOR."""
    parts = topic.split(TOPIC_SEPARATOR)
    return len(parts) == 3 and parts[2] == SENSOR_TOPIC_SUFFIX


def device_name_from_topic(topic: str) -> str:
    return topic.split(TOPIC_SEPARATOR, 1)[0]
