"""MQTT sensor telemetry → Prometheus exporter."""
