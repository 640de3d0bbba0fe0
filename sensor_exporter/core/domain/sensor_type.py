"""Tipos de sensor y tablas fijas de clasificación.

La clasificación es por tabla, no por patrón: un campo sólo es lectura si su
nombre coincide exactamente con el valor de un SensorType.
"""

from __future__ import annotations

from enum import Enum


class SensorType(str, Enum):
    """Categoría canónica de una medición física.

    El valor es a la vez el nombre del campo en el payload y, fuera de la
    familia PM, la clave de la serie de métricas.
    """

    TEMPERATURE = "Temperature"
    PRESSURE = "Pressure"
    HUMIDITY = "Humidity"
    PM10 = "PM10"
    PM2_5 = "PM2.5"
    ILLUMINANCE = "Illuminance"

    @property
    def is_particulate(self) -> bool:
        return self.value.startswith(PM_PREFIX)

    def __str__(self) -> str:
        return self.value


PM_PREFIX = "PM"

# Orden fijo: define el orden de las lecturas decodificadas.
SENSOR_NAMES: tuple[str, ...] = ("SI7021", "SDS0X1", "BH1750", "BMP280")

SENSOR_TYPES: tuple[SensorType, ...] = (
    SensorType.TEMPERATURE,
    SensorType.PRESSURE,
    SensorType.HUMIDITY,
    SensorType.PM10,
    SensorType.PM2_5,
    SensorType.ILLUMINANCE,
)

# Campos auxiliares: "PM10Unit", "TempUnit", ...
UNIT_SUFFIX = "Unit"

NON_SENSOR_FIELDS: tuple[str, ...] = ("Time",)
