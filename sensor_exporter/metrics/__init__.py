"""Metrics module: sink de gauges Prometheus y mapper de lecturas."""

from .mapper import apply_report
from .sink import (
    MetricSink,
    PrometheusMetricSink,
    metric_name,
    register_sensor_gauges,
)

__all__ = [
    "MetricSink",
    "PrometheusMetricSink",
    "apply_report",
    "metric_name",
    "register_sensor_gauges",
]
