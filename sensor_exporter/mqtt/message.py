"""Mensaje entrante tal como lo entrega el receptor MQTT."""

from __future__ import annotations

from dataclasses import dataclass

from .topics import device_name_from_topic


@dataclass(frozen=True)
class SensorMessage:
    """Copia inmutable de un mensaje paho (topic + payload crudo)."""

    topic: str
    payload: bytes

    @property
    def device_name(self) -> str:
        return device_name_from_topic(self.topic)

    @classmethod
    def from_mqtt(cls, msg) -> "SensorMessage":
        """Construye desde un ``paho.mqtt.client.MQTTMessage``."""
        return cls(topic=msg.topic, payload=bytes(msg.payload))
