"""Receptor MQTT.

Usa paho-mqtt para suscribirse a los topics SENSOR y entrega cada mensaje
al SensorCollector. Conexión, suscripción y reconexión viven aquí; el
colector sólo ve SensorMessage.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import paho.mqtt.client as mqtt

from .collector import SensorCollector
from .message import SensorMessage

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "+/tele/SENSOR"


class MQTTReceiver:
    """Receptor MQTT que alimenta la cola del colector."""

    def __init__(
        self,
        collector: SensorCollector,
        broker_host: str = "localhost",
        broker_port: int = 1883,
        username: Optional[str] = None,
        password: Optional[str] = None,
        client_id: str = "tasmota_sensor",
        topic: str = DEFAULT_TOPIC,
    ):
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.username = username
        self.password = password
        self.client_id = f"{client_id}-{int(time.time())}"
        self.topic = topic

        self._collector = collector
        self._client: Optional[mqtt.Client] = None
        self._running = False
        self._connected = False
        self._ever_connected = False
        self._reconnect_count = 0
        self._messages_received = 0

    def start(self) -> bool:
        """Conecta al broker y arranca el loop de red de paho."""
        try:
            self._client = mqtt.Client(
                client_id=self.client_id,
                protocol=mqtt.MQTTv311,
                callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            )

            self._client.on_connect = self._on_connect
            self._client.on_disconnect = self._on_disconnect
            self._client.on_message = self._on_message

            if self.username and self.password:
                self._client.username_pw_set(self.username, self.password)

            logger.info("[MQTT] Connecting to %s:%d", self.broker_host, self.broker_port)

            self._client.connect(self.broker_host, self.broker_port, keepalive=60)
            self._client.loop_start()
            self._running = True

            # Esperar conexión
            for _ in range(50):
                if self._connected:
                    break
                time.sleep(0.1)

            if self._connected:
                logger.info("[MQTT] Started successfully")
                return True
            logger.error("[MQTT] Connection timeout")
            return False

        except Exception as e:
            logger.exception("[MQTT] Start failed: %s", e)
            return False

    def stop(self) -> None:
        self._running = False

        if self._client:
            try:
                self._client.loop_stop()
                self._client.disconnect()
            except Exception as e:
                logger.warning("[MQTT] Error stopping: %s", e)

        logger.info(
            "[MQTT] Stopped. received=%d reconnects=%d",
            self._messages_received,
            self._reconnect_count,
        )

    def _on_connect(self, client, userdata, flags, rc, properties=None):
        if rc == 0:
            if self._ever_connected:
                self._reconnect_count += 1
            self._connected = True
            self._ever_connected = True
            logger.info("[MQTT] Connected to broker")

            # Las suscripciones no sobreviven a una sesión limpia
            client.subscribe(self.topic, qos=0)
            logger.info("[MQTT] Subscribed to %s", self.topic)
        else:
            self._connected = False
            logger.error("[MQTT] Connection failed: rc=%s", rc)

    def _on_disconnect(self, client, userdata, flags, rc, properties=None):
        self._connected = False
        logger.warning("[MQTT] Disconnected (rc=%s)", rc)

    def _on_message(self, client, userdata, msg):
        self._messages_received += 1
        self._collector.put(SensorMessage.from_mqtt(msg))

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def stats(self) -> dict:
        return {
            "running": self._running,
            "connected": self._connected,
            "broker": f"{self.broker_host}:{self.broker_port}",
            "topic": self.topic,
            "messages_received": self._messages_received,
            "reconnect_count": self._reconnect_count,
        }

    def health_check(self) -> dict:
        return {
            "healthy": self._running and self._connected,
            "running": self._running,
            "connected": self._connected,
            "messages_received": self._messages_received,
        }
