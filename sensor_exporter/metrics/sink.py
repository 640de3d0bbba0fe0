"""Sink de métricas sobre prometheus_client.

El sink es una capacidad explícita: se construye una vez, se registran las
series al arrancar y se pasa al colector. Nada de estado global oculto salvo
el registry que se elija exponer.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Mapping, Optional, Protocol, Sequence

from prometheus_client import REGISTRY, CollectorRegistry, Gauge

from ..core.domain import SENSOR_TYPES

logger = logging.getLogger(__name__)

DEVICE_LABEL = "tasmota_instance"
SENSOR_NAME_LABEL = "sensor_name"
RESOLUTION_LABEL = "resolution"
PM_SERIES = "pm"


class MetricSink(Protocol):
    """Contrato mínimo que usa el mapper."""

    def register_gauge(
        self,
        series_key: str,
        exposed_name: str,
        help_text: str,
        label_names: Sequence[str],
    ) -> None: ...

    def set_gauge(
        self,
        series_key: str,
        device: str,
        labels: Mapping[str, str],
        value: float,
    ) -> None: ...


class PrometheusMetricSink:
    """Gauges prometheus_client indexados por clave de serie.

    Cada gauge lleva DEVICE_LABEL primero y luego las etiquetas registradas.
    Los gauges de prometheus_client ya son thread-safe para ``set``; el lock
    sólo protege el diccionario de series durante el registro.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self._registry = registry if registry is not None else REGISTRY
        self._gauges: Dict[str, Gauge] = {}
        self._lock = threading.Lock()

    def register_gauge(
        self,
        series_key: str,
        exposed_name: str,
        help_text: str,
        label_names: Sequence[str],
    ) -> None:
        with self._lock:
            if series_key in self._gauges:
                raise ValueError(f"Series already registered: {series_key}")
            self._gauges[series_key] = Gauge(
                exposed_name,
                help_text,
                [DEVICE_LABEL, *label_names],
                registry=self._registry,
            )
        logger.info("[SINK] Registered gauge %s (key=%s)", exposed_name, series_key)

    def set_gauge(
        self,
        series_key: str,
        device: str,
        labels: Mapping[str, str],
        value: float,
    ) -> None:
        # KeyError para series no registradas: defecto de programación
        gauge = self._gauges[series_key]
        gauge.labels(**{DEVICE_LABEL: device}, **labels).set(value)

    @property
    def series_keys(self) -> list[str]:
        return list(self._gauges)

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry


def metric_name(*parts: str) -> str:
    return "_".join(p for p in parts if p)


def register_sensor_gauges(sink: MetricSink, prefix: str) -> None:
    """Registra una serie por SensorType no-PM más la serie compartida "pm"."""
    for sensor_type in SENSOR_TYPES:
        if sensor_type.is_particulate:
            continue
        slug = sensor_type.value.lower().replace(".", "")
        sink.register_gauge(
            sensor_type.value,
            metric_name(prefix, "tasmota_sensor", slug),
            f"{sensor_type.value} tasmota sensor data",
            (SENSOR_NAME_LABEL,),
        )

    sink.register_gauge(
        PM_SERIES,
        metric_name(prefix, "tasmota", PM_SERIES),
        "PM tasmota entity",
        (SENSOR_NAME_LABEL, RESOLUTION_LABEL),
    )
