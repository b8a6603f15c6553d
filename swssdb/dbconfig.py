"""Database layout configuration: Redis instances and databases per namespace."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from typing import Any

_log = logging.getLogger(__name__)

DEFAULT_SONIC_DB_CONFIG_FILE = "/var/run/redis/sonic-db/database_config.json"
DEFAULT_SONIC_DB_GLOBAL_CONFIG_FILE = "/var/run/redis/sonic-db/database_global.json"

EMPTY_NAMESPACE = ""

_GLOBAL_INIT_REQUIRED = (
    "Initialize global DB config using API SonicDBConfig.initialize_global_config"
)


class DBConfigError(RuntimeError):
    """Raised when the database configuration cannot be loaded or used."""


@dataclass(frozen=True)
class RedisInstInfo:
    """Where a Redis instance can be reached."""

    unix_socket_path: str
    hostname: str
    port: int


@dataclass(frozen=True)
class SonicDBInfo:
    """Which instance a database lives in, its number and key separator."""

    inst_name: str
    db_id: int
    separator: str


def _is_json_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (dict, list)) and not value)


def _field(obj: Any, key: str, kind: type) -> Any:
    if not isinstance(obj, dict):
        raise TypeError(f"cannot use at() with {type(obj).__name__}")
    if key not in obj:
        raise KeyError(f"key '{key}' not found")
    value = obj[key]
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"type must be number for '{key}'")
        return int(value)
    if not isinstance(value, kind):
        raise TypeError(f"type must be {kind.__name__} for '{key}'")
    return value


def _section(document: Any, name: str) -> dict[str, Any]:
    if not isinstance(document, dict):
        raise TypeError(f"cannot use operator[] with {type(document).__name__}")
    section = document.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise TypeError(f"'{name}' must be an object")
    return section


_Parsed = tuple[dict[str, RedisInstInfo], dict[str, SonicDBInfo], dict[int, str]]


def _parse_database_config(path: str) -> _Parsed:
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError:
        message = f"Sonic database config file doesn't exist at {path}"
        _log.error("%s", message)
        raise DBConfigError(message) from None

    try:
        document = json.loads(text)
        instances = {
            name: RedisInstInfo(
                unix_socket_path=_field(entry, "unix_socket_path", str),
                hostname=_field(entry, "hostname", str),
                port=_field(entry, "port", int),
            )
            for name, entry in _section(document, "INSTANCES").items()
        }
        databases: dict[str, SonicDBInfo] = {}
        separators: dict[int, str] = {}
        for name, entry in _section(document, "DATABASES").items():
            info = SonicDBInfo(
                inst_name=_field(entry, "instance", str),
                db_id=_field(entry, "id", int),
                separator=_field(entry, "separator", str),
            )
            databases[name] = info
            separators.setdefault(info.db_id, info.separator)
    except (ValueError, TypeError, KeyError) as exc:
        message = f"Sonic database config file syntax error >> {exc}"
        _log.error("%s", message)
        raise DBConfigError(message) from exc
    return instances, databases, separators


class SonicDBConfig:
    """Database names, ids, separators and Redis instances by namespace.

    The empty namespace holds the local configuration; other namespaces come
    from the global configuration file.
    """

    def __init__(self) -> None:
        self._inst_info: dict[str, dict[str, RedisInstInfo]] = {}
        self._db_info: dict[str, dict[str, SonicDBInfo]] = {}
        self._db_separator: dict[str, dict[int, str]] = {}
        self._init = False
        self._global_init = False

    def _store(self, netns: str, parsed: _Parsed) -> None:
        instances, databases, separators = parsed
        self._inst_info[netns] = instances
        self._db_info[netns] = databases
        self._db_separator[netns] = separators

    def initialize(self, file: str = DEFAULT_SONIC_DB_CONFIG_FILE) -> None:
        """Load the local configuration; loading it twice is an error."""
        if self._init:
            _log.error("SonicDBConfig already initialized")
            raise DBConfigError("SonicDBConfig already initialized")
        self._store(EMPTY_NAMESPACE, _parse_database_config(file))
        self._init = True

    def initialize_global_config(self, file: str = DEFAULT_SONIC_DB_GLOBAL_CONFIG_FILE) -> None:
        """Load every configuration the global file includes.

        A second call, or a missing global file, is logged and ignored.
        """
        if self._global_init:
            _log.error("SonicDBConfig Global config is already initialized")
            return

        try:
            with open(file, encoding="utf-8") as handle:
                text = handle.read()
        except OSError:
            _log.error("Sonic database config global file doesn't exist at %s", file)
            self._global_init = True
            return

        head, sep, _ = file.rpartition("/")
        dir_name = head + sep

        try:
            document = json.loads(text)
            if not isinstance(document, dict):
                raise TypeError(f"cannot use operator[] with {type(document).__name__}")
            includes = document.get("INCLUDES")
            if includes is None:
                includes = []
            elif isinstance(includes, dict):
                includes = list(includes.values())
            elif not isinstance(includes, list):
                raise TypeError("'INCLUDES' must be an array")

            for element in includes:
                if not isinstance(element, dict):
                    raise TypeError("include entries must be objects")
                namespace = element.get("namespace")
                is_default = _is_json_empty(namespace)
                include = element.get("include")
                if not isinstance(include, str):
                    raise TypeError("type must be string for 'include'")
                if is_default:
                    if self._init:
                        continue
                    netns = EMPTY_NAMESPACE
                else:
                    if not isinstance(namespace, str):
                        raise TypeError("type must be string for 'namespace'")
                    netns = namespace

                self._store(netns, _parse_database_config(dir_name + include))
                if is_default:
                    self._init = True
        except (ValueError, TypeError, KeyError, DBConfigError) as exc:
            message = f"Sonic database config file syntax error >> {exc}"
            _log.error("%s", message)
            raise DBConfigError(message) from exc

        self._global_init = True

    def _require_global(self, netns: str) -> None:
        if netns and not self._global_init:
            _log.error("%s", _GLOBAL_INIT_REQUIRED)
            raise DBConfigError(_GLOBAL_INIT_REQUIRED)

    def _ensure_loaded(self, netns: str) -> None:
        if not self._init:
            self.initialize(DEFAULT_SONIC_DB_CONFIG_FILE)
        self._require_global(netns)

    def validate_namespace(self, netns: str) -> None:
        """Raise unless ``netns`` is empty or a namespace from the global config."""
        if not netns:
            return
        self._require_global(netns)
        if netns not in self._inst_info:
            message = f"Namespace {netns} is not a valid namespace name in config file"
            _log.error("%s", message)
            raise DBConfigError(message)

    def _get_db_info(self, db_name: str, netns: str) -> SonicDBInfo:
        self._ensure_loaded(netns)
        infos = self._db_info.get(netns)
        if infos is None:
            message = f"Namespace {netns} is not a valid namespace name in config file"
            _log.error("%s", message)
            raise LookupError(message)
        info = infos.get(db_name)
        if info is None:
            message = f"Failed to find {db_name} database in {netns} namespace"
            _log.error("%s", message)
            raise LookupError(message)
        return info

    def _get_redis_info(self, db_name: str, netns: str) -> RedisInstInfo:
        self._ensure_loaded(netns)
        instances = self._inst_info.get(netns)
        if instances is None:
            message = (
                f"Namespace {netns} is not a valid namespace name in Redis instances in config file"
            )
            _log.error("%s", message)
            raise LookupError(message)
        info = instances.get(self.get_db_inst(db_name, netns))
        if info is None:
            message = (
                f"Failed to find the Redis instance for {db_name} database in {netns} namespace"
            )
            _log.error("%s", message)
            raise LookupError(message)
        return info

    def get_db_inst(self, db_name: str, netns: str = EMPTY_NAMESPACE) -> str:
        return self._get_db_info(db_name, netns).inst_name

    def get_db_id(self, db_name: str, netns: str = EMPTY_NAMESPACE) -> int:
        return self._get_db_info(db_name, netns).db_id

    def get_separator(self, db_name: str, netns: str = EMPTY_NAMESPACE) -> str:
        return self._get_db_info(db_name, netns).separator

    def get_separator_by_id(self, db_id: int, netns: str = EMPTY_NAMESPACE) -> str:
        """The separator of the first database configured with ``db_id``."""
        self._ensure_loaded(netns)
        separators = self._db_separator.get(netns)
        if separators is None:
            message = f"Namespace {netns} is not a valid namespace name in config file"
            _log.error("%s", message)
            raise LookupError(message)
        separator = separators.get(db_id)
        if separator is None:
            message = f"Failed to find {db_id} database in {netns} namespace"
            _log.error("%s", message)
            raise LookupError(message)
        return separator

    def get_db_sock(self, db_name: str, netns: str = EMPTY_NAMESPACE) -> str:
        return self._get_redis_info(db_name, netns).unix_socket_path

    def get_db_hostname(self, db_name: str, netns: str = EMPTY_NAMESPACE) -> str:
        return self._get_redis_info(db_name, netns).hostname

    def get_db_port(self, db_name: str, netns: str = EMPTY_NAMESPACE) -> int:
        return self._get_redis_info(db_name, netns).port

    def get_namespaces(self) -> list[str]:
        """The non-empty namespaces known from the global configuration."""
        if not self._global_init:
            self.initialize_global_config()
        return [netns for netns in self._inst_info if netns]

    def get_db_list(self, netns: str = EMPTY_NAMESPACE) -> list[str]:
        """The database names configured in ``netns``."""
        if not self._init:
            self.initialize()
        self.validate_namespace(netns)
        try:
            return list(self._db_info[netns])
        except KeyError:
            raise LookupError(f"Namespace {netns} has no databases") from None

    def is_init(self) -> bool:
        return self._init

    def is_global_init(self) -> bool:
        return self._global_init


_default: SonicDBConfig | None = None
_default_lock = threading.Lock()


def default_config() -> SonicDBConfig:
    """The process-wide configuration."""
    global _default
    with _default_lock:
        if _default is None:
            _default = SonicDBConfig()
        return _default