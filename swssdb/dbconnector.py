"""A connection to one numbered Redis database."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import redis

from .dbconfig import EMPTY_NAMESPACE, SonicDBConfig, default_config

DEFAULT_UNIXSOCKET = "/var/run/redis/redis.sock"
DEFAULT_PORT = 6379


def _timeout_seconds(timeout_ms: int) -> float | None:
    """Convert a timeout in milliseconds; zero means wait forever."""
    return timeout_ms / 1000 if timeout_ms else None


class DBConnector:
    """A client bound to one Redis database, reached by TCP or unix socket.

    ``timeout`` is in milliseconds; zero waits forever. An already built
    client may be passed as ``client``; it must already be bound to the
    database and is used as it is.
    """

    def __init__(
        self,
        db_id: int,
        host: str | None = None,
        port: int = DEFAULT_PORT,
        unix_socket_path: str | None = None,
        timeout: int = 0,
        db_name: str = "",
        namespace: str = EMPTY_NAMESPACE,
        client: Any = None,
    ) -> None:
        self._db_id = db_id
        self._db_name = db_name
        self._namespace = namespace
        self._host = host
        self._port = port
        self._unix_socket_path = unix_socket_path
        if client is not None:
            self._client = client
            return

        seconds = _timeout_seconds(timeout)
        options: dict[str, Any] = {
            "db": db_id,
            "socket_timeout": seconds,
            "socket_connect_timeout": seconds,
            "decode_responses": True,
        }
        if unix_socket_path:
            self._client = redis.Redis(unix_socket_path=unix_socket_path, **options)
            where = "redis (unix-socket)"
        elif host:
            self._client = redis.Redis(host=host, port=port, **options)
            where = "redis"
        else:
            raise ValueError("either a host or a unix socket path is required")

        try:
            self._client.ping()
        except redis.exceptions.RedisError as exc:
            raise ConnectionError(f"Unable to connect to {where}") from exc

    @property
    def db_id(self) -> int:
        return self._db_id

    @property
    def db_name(self) -> str:
        return self._db_name

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def client(self) -> Any:
        """The underlying Redis client."""
        return self._client

    def close(self) -> None:
        close = getattr(self._client, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> DBConnector:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def new_connector(self, timeout: int) -> DBConnector:
        """Open a fresh connection to the same database."""
        if not self._unix_socket_path and not self._host:
            raise ValueError("connection parameters are unknown for an injected client")
        return DBConnector(
            self._db_id,
            host=self._host,
            port=self._port,
            unix_socket_path=self._unix_socket_path,
            timeout=timeout,
            db_name=self._db_name,
            namespace=self._namespace,
        )

    def pubsub(self) -> Any:
        return self._client.pubsub()

    def set_client_name(self, name: str) -> None:
        """Name this connection, as shown by ``CLIENT LIST``."""
        self._client.client_setname(name)

    def get_client_name(self) -> str:
        """The connection name, or an empty string if none is set."""
        name = self._client.client_getname()
        return name if isinstance(name, str) else ""

    def delete(self, key: str) -> int:
        return int(self._client.delete(key))

    def delete_many(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        if keys:
            self._client.delete(*keys)

    def exists(self, key: str) -> bool:
        if " " in key or "\t" in key:
            raise ValueError("EXISTS failed, invalid space or tab in single key")
        return int(self._client.exists(key)) > 0

    def hdel(self, key: str, *args: str | Iterable[str]) -> int:
        """Delete one or more fields; each argument is a field or fields."""
        fields: list[str] = []
        for arg in args:
            if isinstance(arg, str):
                fields.append(arg)
            else:
                fields.extend(arg)
        if not fields:
            return 0
        return int(self._client.hdel(key, *fields))

    def hgetall(self, key: str) -> dict[str, str]:
        return dict(self._client.hgetall(key))

    def keys(self, pattern: str) -> list[str]:
        return list(self._client.keys(pattern))

    def scan(self, cursor: int = 0, match: str = "", count: int = 10) -> tuple[int, list[str]]:
        """One step of a cursor scan: the next cursor and the keys found."""
        next_cursor, keys = self._client.scan(cursor=cursor, match=match or None, count=count)
        return int(next_cursor), list(keys)

    def set(self, key: str, value: str) -> None:
        self._client.set(key, value)

    def hset(self, key: str, field: str, value: str) -> None:
        self._client.hset(key, field, value)

    def hmset(self, key: str, mapping: Mapping[str, str] | Iterable[tuple[str, str]]) -> None:
        fields = dict(mapping)
        if not fields:
            raise ValueError("hmset requires at least one field")
        self._client.hset(key, mapping=fields)

    def hmset_many(
        self, multi_hash: Mapping[str, Mapping[str, str] | Iterable[tuple[str, str]]]
    ) -> None:
        """Write several hashes in one round trip."""
        pipe = self._client.pipeline()
        for key, pairs in multi_hash.items():
            fields = dict(pairs)
            if fields:
                pipe.hset(key, mapping=fields)
        pipe.execute()

    def get(self, key: str) -> str | None:
        return self._client.get(key)

    def hget(self, key: str, field: str) -> str | None:
        return self._client.hget(key, field)

    def hexists(self, key: str, field: str) -> bool:
        return bool(self._client.hexists(key, field))

    def incr(self, key: str) -> int:
        return int(self._client.incr(key))

    def decr(self, key: str) -> int:
        return int(self._client.decr(key))

    def rpush(self, list_name: str, item: str) -> int:
        return int(self._client.rpush(list_name, item))

    def blpop(self, list_name: str, timeout: int) -> str | None:
        """Pop the head of a list, waiting up to ``timeout`` seconds."""
        reply = self._client.blpop([list_name], timeout)
        if reply is None:
            return None
        _, value = reply
        return value

    def publish(self, channel: str, message: str) -> int:
        """Publish ``message``; returns how many subscribers received it."""
        return int(self._client.publish(channel, message))

    def config_set(self, key: str, value: str) -> None:
        self._client.config_set(key, value)


def connect_by_name(
    db_name: str,
    timeout: int = 0,
    is_tcp_conn: bool = False,
    netns: str = EMPTY_NAMESPACE,
    config: SonicDBConfig | None = None,
) -> DBConnector:
    """Connect to a database named in the configuration."""
    cfg = config if config is not None else default_config()
    db_id = cfg.get_db_id(db_name, netns)
    if is_tcp_conn:
        return DBConnector(
            db_id,
            host=cfg.get_db_hostname(db_name, netns),
            port=cfg.get_db_port(db_name, netns),
            timeout=timeout,
            db_name=db_name,
            namespace=netns,
        )
    return DBConnector(
        db_id,
        unix_socket_path=cfg.get_db_sock(db_name, netns),
        timeout=timeout,
        db_name=db_name,
        namespace=netns,
    )