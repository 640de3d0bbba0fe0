"""Configuración compartida del exporter."""
