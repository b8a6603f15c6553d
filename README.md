# swssdb

Python access to a Redis-backed switch state database, plus the network
address types that go with it.

## What is in the package

- **Database configuration** (`swssdb.dbconfig`): `SonicDBConfig` reads a
  `database_config.json` file (`initialize`) and a `database_global.json` file
  that includes one configuration per namespace (`initialize_global_config`).
  It maps a database name and namespace to its Redis instance, database id,
  key separator, unix socket, hostname and port. `default_config()` returns a
  process-wide instance. Errors in loading raise `DBConfigError`; unknown
  databases or namespaces raise `LookupError`.
- **Connectors** (`swssdb.dbconnector`): `DBConnector` binds a `redis.Redis`
  client to one numbered database, over TCP or a unix socket, with the key,
  hash, list, scan and pub/sub commands used by the rest of the package.
  `connect_by_name()` opens a connector from the database configuration.
- **Retrying access** (`swssdb.dbinterface`): `DBInterface` holds connections
  by name, reconnects after connection failures, and with `blocking=True`
  waits on keyspace notifications until missing data appears, raising
  `UnavailableDataError` if it does not arrive in time.
- **Notifications** (`swssdb.notificationconsumer`): `NotificationConsumer`
  subscribes to a channel and queues messages; `pop()` returns
  `(op, data, field_values)` and `pops()` returns a list of
  `KeyOpFieldsValues`.
- **Field-value JSON** (`swssdb.fvjson`): `build_json` and `read_json` encode
  ordered field/value pairs as a flat JSON array; `load_json_from_file` reads a
  list of `{"<key>": {...}, "OP": "SET"|"DEL"}` objects into
  `KeyOpFieldsValues` items, raising `JsonLoadError` on malformed input.
- **Address types**: `IpAddress` and `AddrScope` (`swssdb.ipaddress`),
  `IpAddresses` (`swssdb.ipaddresses`), `IpPrefix` (`swssdb.ipprefix`), and
  `MacAddress`, `parse_mac_string`, `format_mac` (`swssdb.macaddress`).
- **Shell commands** (`swssdb.shellexec`): `run(cmd)` runs a command through
  the shell and returns its exit status and standard output; it raises
  `ExecError` if the shell cannot be started.

Diagnostics go through the standard `logging` module, under logger names
such as `swssdb.dbconfig`.

## Installing

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Examples

```python
from swssdb.ipprefix import IpPrefix
from swssdb.ipaddress import IpAddress

prefix = IpPrefix("10.1.2.3/24")
print(prefix.get_subnet())                                   # 10.1.2.0/24
print(prefix.is_address_in_subnet(IpAddress("10.1.2.200")))  # True
```

```python
from swssdb.macaddress import MacAddress

mac = MacAddress("02-00-00-AA-BB-CC")
print(mac)   # 02:00:00:aa:bb:cc
```

```python
from swssdb.dbconfig import SonicDBConfig

config = SonicDBConfig()
config.initialize("database_config.json")
print(config.get_db_id("APPL_DB"), config.get_separator("APPL_DB"))
```

Publishing and consuming a notification:

```python
from swssdb.dbconnector import connect_by_name
from swssdb.fvjson import build_json
from swssdb.notificationconsumer import NotificationConsumer

db = connect_by_name("APPL_DB", 0, True, "", config)
consumer = NotificationConsumer(db, "events")

db.publish("events", build_json([("SET", "Ethernet0"), ("mtu", "9100")]))
consumer.read_data()
print(consumer.pop())   # ('SET', 'Ethernet0', [('mtu', '9100')])
```

Reading a hash and waiting for it to appear:

```python
from swssdb.dbinterface import DBInterface

dbi = DBInterface()
dbi.set_redis_kwargs("", "127.0.0.1", 6379)
dbi.connect(4, "CONFIG_DB")
print(dbi.get_all("CONFIG_DB", "PORT|Ethernet0", blocking=True))
```

## What the package does not do

- There is no notification producer class. To publish a notification, encode
  the op/data pair followed by the field/value pairs with `build_json` and
  call `DBConnector.publish`, as in the example above.
- There is no logging component of its own and no way to change log levels
  through the database; configure the standard `logging` module instead.
- There is no command-line tool; the package is a library only.
- It offers no table abstractions (producer/consumer tables, state tables,
  select loops) and no netlink access.