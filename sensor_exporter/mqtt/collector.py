"""Loop de ingesta: cola de mensajes MQTT → decoder → mapper → gauges.

Un único consumidor por colector; los mensajes se procesan estrictamente en
orden. El hilo paho sólo hace ``put`` (bloqueante si la cola está llena, esa
es toda la contrapresión). El loop termina cuando se cierra la cola.

Payload malformado:
- stop_on_malformed=False (default): se registra y se descarta el mensaje.
- stop_on_malformed=True: el loop se detiene (comportamiento histórico).
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Optional

from prometheus_client import Counter

from ..metrics import MetricSink, apply_report
from .collector_stats import CollectorStats
from .decoder import DecodeError, decode_payload
from .message import SensorMessage
from .topics import is_sensor_topic

logger = logging.getLogger(__name__)

MESSAGES_TOTAL = Counter(
    "sensor_exporter_messages_total",
    "MQTT messages handled by the sensor collector",
    ["status"],  # processed, dropped, malformed, failed
)
READINGS_TOTAL = Counter(
    "sensor_exporter_readings_total",
    "Sensor readings applied to gauges",
)

_CLOSE = object()


class SensorCollector:
    """Consumidor de mensajes SENSOR.

    Uso:
        collector = SensorCollector(sink)
        collector.start()
        collector.put(SensorMessage("dev1/tele/SENSOR", b"{...}"))
        ...
        collector.close()
        collector.join()
    """

    def __init__(
        self,
        sink: MetricSink,
        max_queue_size: int = 0,
        stop_on_malformed: bool = False,
    ):
        self._sink = sink
        self._queue: queue.Queue = queue.Queue(maxsize=max_queue_size)
        self._stop_on_malformed = stop_on_malformed
        self._running = False
        self._closed = False
        self._thread: Optional[threading.Thread] = None
        self._stats = CollectorStats()

    def put(self, message: SensorMessage) -> bool:
        """Encola un mensaje. Bloquea si la cola acotada está llena."""
        if self._closed:
            logger.warning("[COLLECTOR] Closed, dropping message topic=%s", message.topic)
            return False
        self._queue.put(message)
        return True

    def close(self) -> None:
        """Cierra la cola: el loop termina tras los mensajes ya encolados."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(_CLOSE)

    def start(self) -> None:
        self._running = True
        self._thread = threading.Thread(
            target=self.run,
            daemon=True,
            name="sensor-collector",
        )
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def run(self) -> None:
        """Consume la cola hasta que se cierra o un payload malformado lo detiene."""
        self._running = True
        logger.info(
            "[COLLECTOR] Started queue_max=%d stop_on_malformed=%s",
            self._queue.maxsize,
            self._stop_on_malformed,
        )
        try:
            while True:
                item = self._queue.get()
                try:
                    if item is _CLOSE:
                        logger.info("[COLLECTOR] Queue closed")
                        return
                    if not self._consume(item):
                        return
                finally:
                    self._queue.task_done()
        finally:
            self._running = False
            self._closed = True
            logger.info("[COLLECTOR] Stopped. %s", self._stats)

    def _consume(self, message: SensorMessage) -> bool:
        """Procesa un mensaje; False si el loop debe detenerse."""
        try:
            self.handle(message)
        except DecodeError as e:
            self._stats.failed += 1
            MESSAGES_TOTAL.labels(status="malformed").inc()
            logger.error(
                "[COLLECTOR] Malformed payload (%s) topic=%s: %s",
                e.kind.value,
                message.topic,
                e,
            )
            if self._stop_on_malformed:
                logger.error("[COLLECTOR] Stopping on malformed payload")
                return False
        except Exception as e:
            self._stats.failed += 1
            MESSAGES_TOTAL.labels(status="failed").inc()
            logger.exception("[COLLECTOR] Processing error topic=%s: %s", message.topic, e)
        return True

    def handle(self, message: SensorMessage) -> bool:
        """Filtro de topic → decode → mapper.

        Returns:
            True si el mensaje actualizó métricas, False si se descartó por topic.

        Raises:
            DecodeError: payload estructuralmente inválido.
        """
        self._stats.received += 1
        self._stats.last_message_at = time.time()

        if not is_sensor_topic(message.topic):
            self._stats.dropped += 1
            MESSAGES_TOTAL.labels(status="dropped").inc()
            logger.debug("[COLLECTOR] Ignoring topic=%s", message.topic)
            return False

        report = decode_payload(message.payload)
        report.device_name = message.device_name
        logger.debug(
            "[COLLECTOR] device=%s readings=%s",
            report.device_name,
            report.readings,
        )

        apply_report(report, self._sink)

        self._stats.processed += 1
        self._stats.readings += len(report.readings)
        MESSAGES_TOTAL.labels(status="processed").inc()
        READINGS_TOTAL.inc(len(report.readings))

        if self._stats.processed % 100 == 0:
            logger.info("[COLLECTOR] %s", self._stats)
        return True

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def queue_depth(self) -> int:
        return self._queue.qsize()

    @property
    def stats(self) -> dict:
        return {
            "running": self._running,
            "queue_depth": self.queue_depth,
            "queue_max": self._queue.maxsize,
            "stop_on_malformed": self._stop_on_malformed,
            **self._stats.to_dict(),
        }

    def health_check(self) -> dict:
        return {
            "healthy": self._running,
            "running": self._running,
            "messages_processed": self._stats.processed,
            "messages_failed": self._stats.failed,
            "last_message_age_seconds": (
                time.time() - self._stats.last_message_at
                if self._stats.last_message_at > 0
                else None
            ),
        }
