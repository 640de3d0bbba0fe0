"""Decodificador de payloads SENSOR.

Dos etapas:
1. orjson → árbol genérico (dict/list/escalares)
2. proyección por las tablas fijas SENSOR_NAMES × SENSOR_TYPES

Formato esperado:
{
    "Time": "2024-01-01T00:00:00",
    "SI7021": {"Temperature": 21.5, "Humidity": 55},
    "SDS0X1": {"PM10": 3, "PM10Unit": "ug/m3", "PM2.5": 5},
    "TempUnit": "C"
}

Sólo un payload que no se puede parsear como mapping es un error duro
(DecodeError). Un hardware con forma incorrecta o un campo no numérico se
omite y el resto del mensaje se sigue decodificando.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import orjson

from ..core.domain import (
    NON_SENSOR_FIELDS,
    SENSOR_NAMES,
    SENSOR_TYPES,
    UNIT_SUFFIX,
    DeviceReport,
    Reading,
    SensorType,
)

logger = logging.getLogger(__name__)


class DecodeErrorKind(Enum):
    MALFORMED = "malformed"
    NOT_A_MAPPING = "not_a_mapping"


class DecodeError(ValueError):
    """Payload estructuralmente inválido."""

    def __init__(self, kind: DecodeErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


def parse_document(payload: bytes) -> dict[str, Any]:
    """Etapa 1: bytes → mapping de nivel superior."""
    try:
        data = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise DecodeError(DecodeErrorKind.MALFORMED, f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError(
            DecodeErrorKind.NOT_A_MAPPING,
            f"Expected a mapping at top level, got {type(data).__name__}",
        )
    return data


def split_fields(fields: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Separa nombres de campo en candidatos a lectura y campos de unidad.

    Mantiene el orden del payload. Los NON_SENSOR_FIELDS no aparecen en
    ninguna de las dos listas.
    """
    keys: List[str] = []
    units: List[str] = []
    for name in fields:
        if name in NON_SENSOR_FIELDS:
            continue
        if name.endswith(UNIT_SUFFIX):
            units.append(name)
        else:
            keys.append(name)
    return keys, units


def classify_fields(keys: Iterable[str]) -> List[SensorType]:
    """Tipos de SENSOR_TYPES presentes en ``keys``, en orden de tabla."""
    present = set(keys)
    return [t for t in SENSOR_TYPES if t.value in present]


def _as_number(value: Any) -> Optional[float]:
    # bool es subclase de int pero no es una lectura
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def read_sensor(sensor_name: str, fields: Any) -> List[Reading]:
    """Lecturas de un único hardware; vacío si ``fields`` no es un mapping."""
    if not isinstance(fields, Mapping):
        logger.debug(
            "[DECODER] Skipping %s: expected mapping, got %s",
            sensor_name,
            type(fields).__name__,
        )
        return []

    keys, units = split_fields(fields.keys())
    if units:
        logger.debug("[DECODER] %s unit fields ignored: %s", sensor_name, units)

    readings: List[Reading] = []
    for sensor_type in classify_fields(keys):
        raw = fields[sensor_type.value]
        value = _as_number(raw)
        if value is None:
            logger.debug(
                "[DECODER] %s.%s is not numeric (%s), skipped",
                sensor_name,
                sensor_type.value,
                type(raw).__name__,
            )
            continue
        readings.append(Reading(type=sensor_type, sensor_name=sensor_name, value=value))
    return readings


def decode_payload(payload: bytes) -> DeviceReport:
    """Decodifica un payload SENSOR en un DeviceReport sin device_name.

    Raises:
        DecodeError: si el payload no es un documento JSON con un mapping
            en el nivel superior.
    """
    data = parse_document(payload)

    report = DeviceReport()
    for sensor_name in SENSOR_NAMES:
        if sensor_name in data:
            report.readings.extend(read_sensor(sensor_name, data[sensor_name]))

    logger.debug("[DECODER] Parsed %d readings from keys=%s", len(report.readings), list(data))
    return report
