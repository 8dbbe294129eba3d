## callmonitor/sinks.py

from __future__ import annotations
import os
from typing import List
import pika
from pika.exceptions import AMQPError
from .schemas import BrokerSettings, FilePayload, Record
from .utils import PublishError, StartupConfigError, logger


class AmqpPublisher:
    """Publishes one message per file: the decoded text, unchanged.

    The connection is opened on first use. Before reuse it is pumped once so
    heartbeats and a broker-side close are noticed; a dead connection is
    replaced before publishing. A failed publish drops the connection so the
    next one reconnects. Nothing is retried here.
    """

    def __init__(self, url: str, exchange: str = "", routing_key: str = "callmonitor",
                 connection_factory=pika.BlockingConnection):
        self.url = url
        try:
            self._params = pika.URLParameters(url)
        except ValueError as e:
            raise StartupConfigError(f"Invalid broker URL: {e}") from e
        self.exchange = exchange
        self.routing_key = routing_key
        self._connection_factory = connection_factory
        self._connection = None
        self._channel = None

    @classmethod
    def from_settings(cls, broker: BrokerSettings) -> "AmqpPublisher":
        url = os.getenv(broker.url_env, "") if broker.url_env else ""
        return cls(url or broker.url, broker.exchange, broker.routing_key)

    def _ensure_channel(self):
        if self._connection is not None:
            try:
                self._connection.process_data_events(time_limit=0)
            except AMQPError as e:
                logger.warning(f"Broker connection lost while idle, reconnecting: {e!r}")
                self._reset()
        if self._channel is None or not self._channel.is_open:
            self._connection = self._connection_factory(self._params)
            self._channel = self._connection.channel()
        return self._channel

    def publish(self, payload: FilePayload) -> None:
        props = pika.BasicProperties(
            content_type="text/plain",
            content_encoding=payload.charset,
            headers={"x-source-path": payload.handle.path},
        )
        try:
            channel = self._ensure_channel()
            channel.basic_publish(
                exchange=self.exchange,
                routing_key=self.routing_key,
                body=payload.text.encode(payload.charset),
                properties=props,
            )
        except AMQPError as e:
            self._reset()
            raise PublishError(f"Publish failed for {payload.handle.path}: {e!r}") from e

    def _reset(self):
        conn, self._connection, self._channel = self._connection, None, None
        if conn is not None and conn.is_open:
            try:
                conn.close()
            except AMQPError as e:
                logger.debug(f"Ignoring error while closing broker connection: {e!r}")

    def close(self) -> None:
        self._reset()


def log_records(payload: FilePayload, records: List[Record]):
    logger.debug(f"Decoded {len(records)} records from {payload.handle.path}")
    for r in records:
        logger.debug(r.model_dump_json())
