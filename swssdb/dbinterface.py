"""Named Redis databases with blocking reads that wait for data to appear."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

import redis

from .dbconnector import DEFAULT_PORT, DBConnector

_log = logging.getLogger(__name__)

T = TypeVar("T")

BLOCKING_ATTEMPT_ERROR_THRESHOLD = 10
BLOCKING_ATTEMPT_SUPPRESSION = BLOCKING_ATTEMPT_ERROR_THRESHOLD + 5

# Seconds to wait before attempting to reconnect to Redis.
CONNECT_RETRY_WAIT_TIME = 10.0
# Seconds to let data settle once its arrival has been announced.
DATA_RETRIEVAL_WAIT_TIME = 3.0
# Seconds to wait for any single pub-sub message.
PUB_SUB_NOTIFICATION_TIMEOUT = 10.0
# Seconds to wait in total for a specific pub-sub notification.
PUB_SUB_MAXIMUM_DATA_WAIT = 60.0

KEYSPACE_PATTERN = "__key*__:*"
# Keyspace and keyevent notifications for every class of command.
KEYSPACE_EVENTS = "KEA"

_CONNECTION_ERRORS = (
    ConnectionError,
    redis.exceptions.ConnectionError,
    redis.exceptions.TimeoutError,
)


class UnavailableDataError(LookupError):
    """Raised when requested data is not (yet) in the database.

    ``data`` is what a keyspace notification must carry to announce it.
    """

    def __init__(self, message: str, data: str) -> None:
        super().__init__(message)
        self.data = data


class DBInterface:
    """A set of database connections addressed by name.

    Reads may block: a missing value makes the call subscribe to keyspace
    notifications and wait until the data is announced or a deadline passes.
    Broken connections are re-established and the request retried.
    """

    def __init__(self) -> None:
        self._clients: dict[str, DBConnector] = {}
        self._keyspace_channels: dict[str, tuple[DBConnector, Any]] = {}
        self._unix_socket_path = ""
        self._host = "127.0.0.1"
        self._port = DEFAULT_PORT
        self.connect_retry_wait = CONNECT_RETRY_WAIT_TIME
        self.data_retrieval_wait = DATA_RETRIEVAL_WAIT_TIME
        self.pub_sub_notification_timeout = PUB_SUB_NOTIFICATION_TIMEOUT
        self.pub_sub_maximum_data_wait = PUB_SUB_MAXIMUM_DATA_WAIT

    def set_redis_kwargs(self, unix_socket_path: str, host: str, port: int) -> None:
        """Where new connections go; a non-empty socket path wins over TCP."""
        self._unix_socket_path = unix_socket_path
        self._host = host
        self._port = port

    def connect(self, db_id: int, db_name: str, retry: bool = True) -> None:
        """Connect ``db_name`` to database ``db_id``, retrying forever if asked."""
        if retry:
            self._persistent_connect(db_id, db_name)
        else:
            self._onetime_connect(db_id, db_name)

    def close(self, db_name: str) -> None:
        client = self._clients.pop(db_name, None)
        if client is not None:
            client.close()

    def delete(self, db_name: str, key: str, blocking: bool = False) -> int:
        return self._blockable(
            lambda: self.get_redis_client(db_name).delete(key), db_name, blocking, int
        )

    def delete_all_by_pattern(self, db_name: str, pattern: str) -> None:
        """Delete every key matching ``pattern``."""
        client = self.get_redis_client(db_name)
        for key in client.keys(pattern):
            client.delete(key)

    def exists(self, db_name: str, key: str) -> bool:
        return self.get_redis_client(db_name).exists(key)

    def get(self, db_name: str, hash_name: str, key: str, blocking: bool = False) -> str:
        """One field of a hash; the text ``None`` reads as an empty string."""

        def read() -> str:
            value = self.get_redis_client(db_name).hget(hash_name, key)
            if value is None:
                message = (
                    f"Key '{hash_name}' field '{key}' unavailable in database '{db_name}'"
                )
                _log.warning("%s", message)
                raise UnavailableDataError(message, hash_name)
            return "" if value == "None" else value

        return self._blockable(read, db_name, blocking, str)

    def hexists(self, db_name: str, hash_name: str, key: str) -> bool:
        return self.get_redis_client(db_name).hexists(hash_name, key)

    def get_all(self, db_name: str, hash_name: str, blocking: bool = False) -> dict[str, str]:
        """A whole hash; values ``None`` read as empty strings."""

        def read() -> dict[str, str]:
            fields = self.get_redis_client(db_name).hgetall(hash_name)
            if not fields:
                message = f"Key '{{{hash_name}}}' unavailable in database '{{{db_name}}}'"
                _log.warning("%s", message)
                raise UnavailableDataError(message, hash_name)
            return {name: "" if value == "None" else value for name, value in fields.items()}

        return self._blockable(read, db_name, blocking, dict)

    def keys(self, db_name: str, pattern: str = "*", blocking: bool = False) -> list[str]:
        def read() -> list[str]:
            found = self.get_redis_client(db_name).keys(pattern)
            if not found:
                message = f"DB '{{{db_name}}}' is empty with pattern '{pattern}'!"
                _log.warning("%s", message)
                raise UnavailableDataError(message, "hset")
            return found

        return self._blockable(read, db_name, blocking, list)

    def scan(self, db_name: str, cursor: int, match: str, count: int) -> tuple[int, list[str]]:
        return self.get_redis_client(db_name).scan(cursor, match, count)

    def publish(self, db_name: str, channel: str, message: str) -> int:
        return self.get_redis_client(db_name).publish(channel, message)

    def set(
        self, db_name: str, hash_name: str, key: str, value: str, blocking: bool = False
    ) -> int:
        """Set one hash field; returns the number of fields written."""

        def write() -> int:
            self.get_redis_client(db_name).hset(hash_name, key, value)
            return 1

        return self._blockable(write, db_name, blocking, int)

    def get_redis_client(self, db_name: str) -> DBConnector:
        try:
            return self._clients[db_name]
        except KeyError:
            raise KeyError(f"no connection to database '{db_name}'") from None

    def _blockable(
        self, func: Callable[[], T], db_name: str, blocking: bool, default: Callable[[], T]
    ) -> T:
        attempts = 0
        while True:
            try:
                result = func()
            except UnavailableDataError as exc:
                if not blocking:
                    return default()
                if db_name in self._keyspace_channels:
                    if self._unavailable_data_handler(db_name, exc.data):
                        continue
                    self._unsubscribe_keyspace_notification(db_name)
                    raise
                # Subscribe first, then read again, so no update is missed.
                self._subscribe_keyspace_notification(db_name)
                continue
            except _CONNECTION_ERRORS:
                attempts += 1
                self._connection_error_handler(db_name)
                message = f"DB access failure by [{db_name}]"
                if BLOCKING_ATTEMPT_ERROR_THRESHOLD < attempts < BLOCKING_ATTEMPT_SUPPRESSION:
                    _log.error("%s", message)
                else:
                    _log.warning("%s", message)
                continue
            self._unsubscribe_keyspace_notification(db_name)
            return result

    def _unsubscribe_keyspace_notification(self, db_name: str) -> None:
        entry = self._keyspace_channels.pop(db_name, None)
        if entry is None:
            return
        _log.debug("Unsubscribe from keyspace notification")
        connector, pubsub = entry
        close = getattr(pubsub, "close", None)
        if close is not None:
            close()
        connector.close()

    def _unavailable_data_handler(self, db_name: str, data: str) -> bool:
        """Wait for a notification carrying ``data``; False if none came in time."""
        _log.debug("Listening on pubsub channel '%s'", db_name)
        start = time.monotonic()
        while time.monotonic() - start < self.pub_sub_maximum_data_wait:
            _, pubsub = self._keyspace_channels[db_name]
            message = pubsub.get_message(
                ignore_subscribe_messages=True, timeout=self.pub_sub_notification_timeout
            )
            if not message or message.get("type") != "pmessage":
                continue
            payload = message.get("data")
            if not isinstance(payload, str):
                raise RuntimeError("Wrong expected type of result")
            if payload == data:
                _log.info("'%s' acquired via pub-sub dbName=%s. Unblocking...", data, db_name)
                time.sleep(self.data_retrieval_wait)
                return True
        _log.warning("No notification for '%s' from '%s' received before timeout.", data, db_name)
        return False

    def _subscribe_keyspace_notification(self, db_name: str) -> None:
        _log.debug("Subscribe to keyspace notification")
        connector = self.get_redis_client(db_name).new_connector(0)
        pubsub = connector.pubsub()
        pubsub.psubscribe(KEYSPACE_PATTERN)
        self._keyspace_channels[db_name] = (connector, pubsub)

    def _connection_error_handler(self, db_name: str) -> None:
        _log.warning("Could not connect to Redis--waiting before trying again.")
        db_id = self.get_redis_client(db_name).db_id
        self.close(db_name)
        time.sleep(self.connect_retry_wait)
        self.connect(db_id, db_name, True)

    def _onetime_connect(self, db_id: int, db_name: str) -> None:
        if not db_name:
            raise ValueError("dbName")
        if db_name in self._clients:
            return
        if self._unix_socket_path:
            client = DBConnector(
                db_id, unix_socket_path=self._unix_socket_path, timeout=0, db_name=db_name
            )
        else:
            client = DBConnector(
                db_id, host=self._host, port=self._port, timeout=0, db_name=db_name
            )
        self._clients[db_name] = client
        client.config_set("notify-keyspace-events", KEYSPACE_EVENTS)

    def _persistent_connect(self, db_id: int, db_name: str) -> None:
        while True:
            try:
                self._onetime_connect(db_id, db_name)
                return
            except _CONNECTION_ERRORS:
                _log.warning(
                    "Connecting to DB '%s(%d)' failed, will retry in %s s",
                    db_name,
                    db_id,
                    self.connect_retry_wait,
                )
                self.close(db_name)
                time.sleep(self.connect_retry_wait)