from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthStatus(BaseModel):
    status: str


class CollectorStatsOut(BaseModel):
    running: bool
    queue_depth: int
    queue_max: int
    stop_on_malformed: bool
    received: int
    dropped: int
    processed: int
    failed: int
    readings: int
    last_message_at: float


class ReceiverStatsOut(BaseModel):
    running: bool
    connected: bool
    broker: str
    topic: str
    messages_received: int
    reconnect_count: int


class ExporterStats(BaseModel):
    collector: CollectorStatsOut
    # None cuando el receptor MQTT no se inició
    receiver: Optional[ReceiverStatsOut] = None
