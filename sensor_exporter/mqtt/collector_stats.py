"""Estadísticas del colector de sensores."""

from __future__ import annotations


class CollectorStats:
    """Contadores del loop de ingesta (sólo los escribe el hilo consumidor)."""

    def __init__(self):
        self.received = 0
        self.dropped = 0
        self.processed = 0
        self.failed = 0
        self.readings = 0
        self.last_message_at: float = 0

    def __str__(self) -> str:
        return (
            f"Stats: received={self.received} processed={self.processed} "
            f"dropped={self.dropped} failed={self.failed} readings={self.readings}"
        )

    def to_dict(self) -> dict:
        return {
            "received": self.received,
            "dropped": self.dropped,
            "processed": self.processed,
            "failed": self.failed,
            "readings": self.readings,
            "last_message_at": self.last_message_at,
        }
