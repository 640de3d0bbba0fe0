"""MQTT → Prometheus para mensajes SENSOR.

Estructura modular:
- topics.py: filtro de topics y nombre de dispositivo
- message.py: mensaje entrante inmutable
- decoder.py: payload → DeviceReport
- collector.py: loop de ingesta (cola + hilo consumidor)
- receiver.py: cliente paho que alimenta el colector
"""

from .collector import SensorCollector
from .decoder import DecodeError, DecodeErrorKind, decode_payload
from .message import SensorMessage
from .receiver import MQTTReceiver
from .topics import device_name_from_topic, is_sensor_topic

__all__ = [
    "SensorCollector",
    "DecodeError",
    "DecodeErrorKind",
    "decode_payload",
    "SensorMessage",
    "MQTTReceiver",
    "device_name_from_topic",
    "is_sensor_topic",
]
