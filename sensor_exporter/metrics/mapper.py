"""Mapper DeviceReport → mutaciones de gauges.

La familia PM comparte una sola serie ("pm") diferenciada por la etiqueta
``resolution``; el resto usa una serie por tipo.
"""

from __future__ import annotations

from ..core.domain import DeviceReport
from .sink import PM_SERIES, RESOLUTION_LABEL, SENSOR_NAME_LABEL, MetricSink


def apply_report(report: DeviceReport, sink: MetricSink) -> None:
    """Una llamada a ``set_gauge`` por lectura, en orden. Last-write-wins."""
    for reading in report.readings:
        if not reading.type.is_particulate:
            sink.set_gauge(
                reading.type.value,
                report.device_name,
                {SENSOR_NAME_LABEL: reading.sensor_name},
                reading.value,
            )
        else:
            sink.set_gauge(
                PM_SERIES,
                report.device_name,
                {
                    SENSOR_NAME_LABEL: reading.sensor_name,
                    RESOLUTION_LABEL: reading.type.value,
                },
                reading.value,
            )
