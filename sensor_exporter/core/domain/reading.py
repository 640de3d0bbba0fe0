"""Modelo de dominio para lecturas de sensores."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .sensor_type import SensorType


@dataclass(frozen=True)
class Reading:
    """Lectura decodificada: (tipo, hardware, valor).

    Vive sólo durante un ciclo de ingesta:
    MQTT → decoder → mapper → gauge
    """

    type: SensorType
    sensor_name: str
    value: float


@dataclass
class DeviceReport:
    """Todas las lecturas de un mensaje SENSOR de un dispositivo.

    device_name sale del topic, no del payload; el decoder lo deja vacío.
    """

    device_name: str = ""
    readings: List[Reading] = field(default_factory=list)
