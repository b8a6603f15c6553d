"""JSON encoding of field/value lists and loading of key/op/field-value files."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import IO, Any

_log = logging.getLogger(__name__)

# Each object in a loadable file holds exactly the data entry and the op entry.
_ELEMENT_COUNT = 2
_VALID_OPS = frozenset({"SET", "DEL"})


class JsonLoadError(ValueError):
    """Raised when a key/op/field-value JSON document cannot be loaded."""


@dataclass
class KeyOpFieldsValues:
    """A table key, an operation and its ordered field/value pairs."""

    key: str = ""
    op: str = ""
    fields_values: list[tuple[str, str]] = field(default_factory=list)


def build_json(fvs: Iterable[tuple[str, str]]) -> str:
    """Encode field/value pairs as a flat JSON array, keeping their order."""
    flat: list[str] = []
    for name, value in fvs:
        flat.append(name)
        flat.append(value)
    return json.dumps(flat, separators=(",", ":"), ensure_ascii=False)


def read_json(text: str) -> list[tuple[str, str]]:
    """Decode a flat JSON array of strings back into field/value pairs."""
    items = json.loads(text)
    if not isinstance(items, list):
        raise ValueError("field/value JSON must be an array")
    if len(items) % 2:
        raise ValueError("field/value JSON array must have an even number of elements")
    if not all(isinstance(item, str) for item in items):
        raise ValueError("field/value JSON array must hold only strings")
    return list(zip(items[::2], items[1::2]))


def _value_to_str(value: Any) -> str:
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(int(value))
    if isinstance(value, str):
        return value
    return ""


def load_json_from_file(stream: IO[str]) -> list[KeyOpFieldsValues]:
    """Parse a list of ``{"<key>": {field: value, ...}, "OP": "SET"|"DEL"}`` objects.

    Entries whose op is neither SET nor DEL are skipped. Malformed documents
    raise ``JsonLoadError``.
    """
    try:
        document = json.load(stream)
    except (ValueError, MemoryError) as exc:
        raise JsonLoadError(f"Unable to parse json from the input stream: {exc}") from exc

    if not isinstance(document, list):
        raise JsonLoadError("Root element must be an array.")

    items: list[KeyOpFieldsValues] = []
    for element in document:
        if not isinstance(element, dict):
            raise JsonLoadError(f"Child elements must be objects. element:{json.dumps(element)}")
        if len(element) != _ELEMENT_COUNT:
            raise JsonLoadError(
                f"Child elements must have both key and op entry. {json.dumps(element)}"
            )

        item = KeyOpFieldsValues()
        keep = True
        for name in sorted(element):
            child = element[name]
            if isinstance(child, dict):
                item.key = name
                item.fields_values.extend(
                    (field_name, _value_to_str(value)) for field_name, value in child.items()
                )
                continue
            if not isinstance(child, str):
                raise JsonLoadError(f"Child elements' op field must be a string, got {child!r}")
            if child not in _VALID_OPS:
                _log.error("Child elements' op field must be SET or DEL, but got %s, ignored", child)
                keep = False
                break
            item.op = child
        if keep:
            items.append(item)
    return items