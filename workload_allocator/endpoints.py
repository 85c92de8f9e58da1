from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Protocol

from kafka import KafkaProducer
from kafka.errors import NoBrokersAvailable

LOGGER = logging.getLogger("workload_allocator.endpoints")

SEND_TIMEOUT_S = 30


class Endpoint(Protocol):
    """Execution target that accepts workload operations.

    Endpoints are shared: the assembler and every workload built for an endpoint
    hold the same reference.
    """

    name: str

    async def submit(self, operation: dict[str, Any]) -> None: ...


class PriceObserver(Protocol):
    def reference_gas_price(self) -> int: ...


class StaticPriceObserver:
    def __init__(self, price: int) -> None:
        self._price = price

    def reference_gas_price(self) -> int:
        return self._price


def create_producer(broker: str, connect_timeout_s: float = 60.0) -> KafkaProducer:
    # Reconnect backoff: 1s, growing 1.5x per attempt, capped at 10s, until the deadline.
    backoff = 1.0
    max_backoff = 10.0
    deadline = time.time() + connect_timeout_s

    while True:
        try:
            return KafkaProducer(
                bootstrap_servers=broker,
                key_serializer=lambda v: v.encode("utf-8") if v else None,
                value_serializer=lambda v: json.dumps(v).encode("utf-8"),
            )
        except NoBrokersAvailable as exc:
            if time.time() >= deadline:
                raise ConnectionError(
                    f"failed to connect to Kafka broker within {connect_timeout_s:.0f} seconds"
                ) from exc

            time.sleep(backoff)
            backoff = min(backoff * 1.5, max_backoff)


class KafkaEndpoint:
    """Endpoint that publishes operations as JSON records to one Kafka topic."""

    def __init__(self, broker: str, topic: str, name: str | None = None) -> None:
        self._broker = broker
        self._topic = topic
        self.name = name or topic
        self._producer: KafkaProducer | None = None

    async def submit(self, operation: dict[str, Any]) -> None:
        await asyncio.to_thread(self._send, operation)

    def close(self) -> None:
        if self._producer is None:
            return
        self._producer.flush()
        self._producer.close()
        self._producer = None

    def _send(self, operation: dict[str, Any]) -> None:
        if self._producer is None:
            LOGGER.info("Connecting endpoint %s to %s", self.name, self._broker)
            self._producer = create_producer(self._broker)
        future = self._producer.send(self._topic, key=operation.get("id"), value=operation)
        future.get(timeout=SEND_TIMEOUT_S)

    def __repr__(self) -> str:
        return f"KafkaEndpoint(name={self.name!r}, topic={self._topic!r})"


__all__ = [
    "Endpoint",
    "KafkaEndpoint",
    "PriceObserver",
    "StaticPriceObserver",
    "create_producer",
]
