"""Core del exporter: modelos de dominio compartidos por MQTT y métricas."""
