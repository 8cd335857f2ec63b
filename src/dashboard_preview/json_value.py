"""Total, default-returning navigation over parsed JSON documents."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator


class JsonKind(str, Enum):
    """Kinds a parsed JSON value can take, plus ``MISSING`` for absent fields."""

    MISSING = "missing"
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def _kind_of(value: Any) -> JsonKind:
    # bool is checked before int because bool subclasses int.
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    return JsonKind.MISSING


@dataclass(frozen=True, slots=True)
class JsonValue:
    """A tagged JSON node.

    Every accessor is total: stepping into a field that is absent, or into a
    node of the wrong kind, yields a ``MISSING`` node instead of raising.
    """

    kind: JsonKind
    raw: Any = None

    @classmethod
    def wrap(cls, value: Any) -> JsonValue:
        if isinstance(value, JsonValue):
            return value
        kind = _kind_of(value)
        return cls(kind=kind, raw=None if kind is JsonKind.MISSING else value)

    @classmethod
    def missing(cls) -> JsonValue:
        return cls(kind=JsonKind.MISSING)

    @property
    def is_missing(self) -> bool:
        return self.kind is JsonKind.MISSING

    def get(self, key: str) -> JsonValue:
        if self.kind is not JsonKind.OBJECT or key not in self.raw:
            return JsonValue.missing()
        return JsonValue.wrap(self.raw[key])

    def path(self, *keys: str | int) -> JsonValue:
        node = self
        for key in keys:
            node = node.at(key) if isinstance(key, int) else node.get(key)
        return node

    def at(self, index: int) -> JsonValue:
        if self.kind is not JsonKind.ARRAY or not -len(self.raw) <= index < len(self.raw):
            return JsonValue.missing()
        return JsonValue.wrap(self.raw[index])

    def as_list(self) -> list[JsonValue]:
        """Elements of an array, or the values of an object in insertion order."""
        if self.kind is JsonKind.ARRAY:
            return [JsonValue.wrap(item) for item in self.raw]
        if self.kind is JsonKind.OBJECT:
            return [JsonValue.wrap(item) for item in self.raw.values()]
        return []

    def items(self) -> Iterator[tuple[str, JsonValue]]:
        if self.kind is not JsonKind.OBJECT:
            return iter(())
        return ((key, JsonValue.wrap(value)) for key, value in self.raw.items())

    def as_str(self, default: str | None = None) -> str | None:
        return self.raw if self.kind is JsonKind.STRING else default

    def as_int(self, default: int = 0) -> int:
        if self.kind is not JsonKind.NUMBER:
            return default
        if isinstance(self.raw, float) and not self.raw.is_integer():
            return default
        return int(self.raw)

    def __bool__(self) -> bool:
        if self.kind in (JsonKind.MISSING, JsonKind.NULL):
            return False
        if self.kind in (JsonKind.ARRAY, JsonKind.OBJECT, JsonKind.STRING):
            return len(self.raw) > 0
        return bool(self.raw)
