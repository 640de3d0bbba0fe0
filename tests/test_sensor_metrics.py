"""Tests del sink Prometheus y del mapper de lecturas."""

from unittest.mock import MagicMock, call

import pytest
from prometheus_client import CollectorRegistry

from sensor_exporter.core.domain import DeviceReport, Reading, SensorType
from sensor_exporter.metrics import (
    PrometheusMetricSink,
    apply_report,
    metric_name,
    register_sensor_gauges,
)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def sink(registry) -> PrometheusMetricSink:
    s = PrometheusMetricSink(registry)
    register_sensor_gauges(s, "mqtt")
    return s


@pytest.fixture
def mixed_report() -> DeviceReport:
    return DeviceReport(
        device_name="dev1",
        readings=[
            Reading(SensorType.TEMPERATURE, "SI7021", 21.5),
            Reading(SensorType.HUMIDITY, "SI7021", 55.0),
            Reading(SensorType.PM10, "SDS0X1", 3.0),
            Reading(SensorType.PM2_5, "SDS0X1", 5.0),
        ],
    )


def _temperature(registry, device="dev1", sensor="SI7021"):
    return registry.get_sample_value(
        "mqtt_tasmota_sensor_temperature",
        {"tasmota_instance": device, "sensor_name": sensor},
    )


def _pm(registry, resolution, device="dev1", sensor="SDS0X1"):
    return registry.get_sample_value(
        "mqtt_tasmota_pm",
        {"tasmota_instance": device, "sensor_name": sensor, "resolution": resolution},
    )


# =============================================================================
# REGISTRO
# =============================================================================

class TestRegistration:

    def test_registers_non_pm_series_plus_pm(self, sink):
        assert sink.series_keys == [
            "Temperature",
            "Pressure",
            "Humidity",
            "Illuminance",
            "pm",
        ]

    def test_exposed_names(self):
        fake = MagicMock()

        register_sensor_gauges(fake, "mqtt")

        names = [c.args[1] for c in fake.register_gauge.call_args_list]
        assert names == [
            "mqtt_tasmota_sensor_temperature",
            "mqtt_tasmota_sensor_pressure",
            "mqtt_tasmota_sensor_humidity",
            "mqtt_tasmota_sensor_illuminance",
            "mqtt_tasmota_pm",
        ]
        assert fake.register_gauge.call_args_list[-1] == call(
            "pm", "mqtt_tasmota_pm", "PM tasmota entity", ("sensor_name", "resolution")
        )
        assert fake.register_gauge.call_args_list[0].args[2] == "Temperature tasmota sensor data"

    def test_empty_prefix(self):
        assert metric_name("", "tasmota_sensor", "humidity") == "tasmota_sensor_humidity"

    def test_duplicate_series_rejected(self, sink):
        with pytest.raises(ValueError):
            sink.register_gauge("pm", "other_pm", "dup", ("sensor_name",))

    def test_unregistered_series_is_a_defect(self, registry):
        empty = PrometheusMetricSink(registry)

        with pytest.raises(KeyError):
            empty.set_gauge("Temperature", "dev1", {"sensor_name": "SI7021"}, 1.0)


# =============================================================================
# MAPPER
# =============================================================================

class TestMapper:

    def test_one_call_per_reading_in_order(self, mixed_report):
        fake = MagicMock()

        apply_report(mixed_report, fake)

        assert fake.set_gauge.call_args_list == [
            call("Temperature", "dev1", {"sensor_name": "SI7021"}, 21.5),
            call("Humidity", "dev1", {"sensor_name": "SI7021"}, 55.0),
            call("pm", "dev1", {"sensor_name": "SDS0X1", "resolution": "PM10"}, 3.0),
            call("pm", "dev1", {"sensor_name": "SDS0X1", "resolution": "PM2.5"}, 5.0),
        ]

    def test_empty_report_is_noop(self):
        fake = MagicMock()

        apply_report(DeviceReport(device_name="dev1"), fake)

        fake.set_gauge.assert_not_called()

    def test_gauges_updated(self, sink, registry, mixed_report):
        apply_report(mixed_report, sink)

        assert _temperature(registry) == 21.5
        assert _pm(registry, "PM10") == 3.0
        assert _pm(registry, "PM2.5") == 5.0
        assert registry.get_sample_value(
            "mqtt_tasmota_sensor_humidity",
            {"tasmota_instance": "dev1", "sensor_name": "SI7021"},
        ) == 55.0

    def test_idempotent(self, sink, registry, mixed_report):
        apply_report(mixed_report, sink)
        once = [_temperature(registry), _pm(registry, "PM10"), _pm(registry, "PM2.5")]

        apply_report(mixed_report, sink)
        twice = [_temperature(registry), _pm(registry, "PM10"), _pm(registry, "PM2.5")]

        assert once == twice

    def test_last_write_wins(self, sink, registry):
        first = DeviceReport("dev1", [Reading(SensorType.TEMPERATURE, "SI7021", 20.0)])
        second = DeviceReport("dev1", [Reading(SensorType.TEMPERATURE, "SI7021", 25.0)])

        apply_report(first, sink)
        apply_report(second, sink)

        assert _temperature(registry) == 25.0

    def test_devices_are_separate_series(self, sink, registry):
        apply_report(DeviceReport("a", [Reading(SensorType.TEMPERATURE, "BMP280", 1.0)]), sink)
        apply_report(DeviceReport("b", [Reading(SensorType.TEMPERATURE, "BMP280", 2.0)]), sink)

        assert _temperature(registry, "a", "BMP280") == 1.0
        assert _temperature(registry, "b", "BMP280") == 2.0
