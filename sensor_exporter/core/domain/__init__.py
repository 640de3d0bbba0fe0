"""Domain layer - Modelos y tablas de sensores."""

from .reading import DeviceReport, Reading
from .sensor_type import (
    NON_SENSOR_FIELDS,
    PM_PREFIX,
    SENSOR_NAMES,
    SENSOR_TYPES,
    UNIT_SUFFIX,
    SensorType,
)

__all__ = [
    "DeviceReport",
    "Reading",
    "SensorType",
    "SENSOR_NAMES",
    "SENSOR_TYPES",
    "NON_SENSOR_FIELDS",
    "UNIT_SUFFIX",
    "PM_PREFIX",
]
