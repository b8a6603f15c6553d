"""Receive operation notifications published on a Redis channel."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

import redis

from .fvjson import KeyOpFieldsValues, read_json

_log = logging.getLogger(__name__)

# Milliseconds the subscribing connection waits for a reply.
NOTIFICATION_SUBSCRIBE_TIMEOUT = 1000
DEFAULT_NC_POP_BATCH_SIZE = 2048
DEFAULT_PRIORITY = 100

_SUBSCRIBE_ERRORS = (ConnectionError, OSError, redis.exceptions.RedisError)
_CONFIRMATIONS = frozenset({"subscribe", "psubscribe", "unsubscribe", "punsubscribe"})


class NotificationConsumer:
    """Subscribes to one channel and queues the notifications it receives.

    Messages are read from the subscription by ``read_data`` (blocking) or
    ``peek`` (non-blocking) and taken off the queue by ``pop`` or ``pops``.
    """

    def __init__(
        self,
        db: Any,
        channel: str,
        pri: int = DEFAULT_PRIORITY,
        pop_batch_size: int = DEFAULT_NC_POP_BATCH_SIZE,
    ) -> None:
        self._db = db
        self._channel = channel
        self.pri = pri
        self.pop_batch_size = pop_batch_size
        self._queue: deque[str] = deque()
        self._connector: Any = None
        self._pubsub: Any = None
        while True:
            try:
                self._subscribe()
                break
            except _SUBSCRIBE_ERRORS:
                self._release()
                _log.error("failed to subscribe on %s", self._channel)

    @property
    def channel(self) -> str:
        return self._channel

    def _subscribe(self) -> None:
        self._connector = self._db.new_connector(NOTIFICATION_SUBSCRIBE_TIMEOUT)
        self._pubsub = self._connector.pubsub()
        self._pubsub.subscribe(self._channel)
        _log.info("subscribed to %s", self._channel)

    def _release(self) -> None:
        for resource in (self._pubsub, self._connector):
            close = getattr(resource, "close", None)
            if close is not None:
                close()
        self._pubsub = None
        self._connector = None

    def close(self) -> None:
        """Drop the subscription."""
        self._release()

    def __enter__(self) -> NotificationConsumer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _next_message(self, timeout: float) -> dict[str, Any] | None:
        return self._pubsub.get_message(ignore_subscribe_messages=False, timeout=timeout)

    def _process_reply(self, message: dict[str, Any]) -> None:
        kind = message.get("type")
        if kind in _CONFIRMATIONS:
            return
        if kind != "message":
            _log.error("expected a message on channel %s, got: %s", self._channel, kind)
            raise RuntimeError("getRedisReply operation failed")
        payload = message.get("data")
        if isinstance(payload, (bytes, bytearray)):
            payload = bytes(payload).decode("utf-8")
        if not isinstance(payload, str):
            _log.error("expected string data on channel %s, got: %r", self._channel, payload)
            raise RuntimeError("getRedisReply operation failed")
        _log.debug("got message: %s", payload)
        self._queue.append(payload)

    def _drain_available(self) -> bool:
        """Queue every message that can be read without waiting."""
        received = False
        while True:
            message = self._next_message(0.0)
            if message is None:
                return received
            received = True
            self._process_reply(message)

    def read_data(self) -> int:
        """Wait for one message, then queue whatever else is already available."""
        try:
            message = self._next_message(NOTIFICATION_SUBSCRIBE_TIMEOUT / 1000)
        except _SUBSCRIBE_ERRORS as exc:
            _log.error("failed to read redis reply on channel %s", self._channel)
            raise RuntimeError("Unable to read redis reply") from exc
        if message is None:
            _log.error("failed to read redis reply on channel %s", self._channel)
            raise RuntimeError("Unable to read redis reply")
        self._process_reply(message)
        try:
            self._drain_available()
        except _SUBSCRIBE_ERRORS as exc:
            raise RuntimeError("Unable to read redis reply") from exc
        return 0

    def has_data(self) -> bool:
        return len(self._queue) > 0

    def has_cached_data(self) -> bool:
        return len(self._queue) > 1

    def pop(self) -> tuple[str, str, list[tuple[str, str]]]:
        """Take the oldest notification as ``(op, data, field/values)``."""
        if not self._queue:
            _log.error("notification queue is empty, can't pop")
            raise IndexError("notification queue is empty, can't pop")
        message = self._queue.popleft()
        values = read_json(message)
        if not values:
            raise ValueError("notification carries no op/data pair")
        (op, data), *rest = values
        return op, data, rest

    def pops(self) -> list[KeyOpFieldsValues]:
        """Take queued notifications, reading more while available, up to the batch size."""
        items: list[KeyOpFieldsValues] = []
        while self._queue:
            while self._queue:
                op, data, values = self.pop()
                items.append(KeyOpFieldsValues(key=data, op=op, fields_values=values))
            if len(items) >= self.pop_batch_size:
                return items
            try:
                if not self._drain_available():
                    break
            except _SUBSCRIBE_ERRORS:
                break
        return items

    def peek(self) -> int:
        """1 if a notification is ready, 0 if none, -1 if the subscription failed."""
        if not self._queue:
            try:
                self._drain_available()
            except _SUBSCRIBE_ERRORS:
                return -1
        return 1 if self._queue else 0